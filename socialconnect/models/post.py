from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class PostCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[List[str]] = None


class PostUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[List[str]] = None
    isPublished: Optional[bool] = None


class CommentCreate(BaseModel):
    content: Optional[str] = None


class CommentOut(BaseModel):
    id: str
    content: str
    author: str
    authorId: str
    authorUsername: str
    postId: str
    createdAt: datetime

    @classmethod
    def from_doc(cls, doc: dict) -> "CommentOut":
        return cls(
            id=str(doc["_id"]),
            content=doc["content"],
            author=doc["author"],
            authorId=str(doc["authorId"]),
            authorUsername=doc["authorUsername"],
            postId=str(doc["postId"]),
            createdAt=doc["createdAt"],
        )


class PostOut(BaseModel):
    id: str
    title: str
    content: str
    author: str
    authorId: str
    authorUsername: str
    image: Optional[str] = None
    tags: List[str] = []
    likes: int = 0
    likedBy: List[str] = []
    comments: int = 0
    isPublished: bool = True
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_doc(cls, doc: dict) -> "PostOut":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            content=doc["content"],
            author=doc["author"],
            authorId=str(doc["authorId"]),
            authorUsername=doc["authorUsername"],
            image=doc.get("image"),
            tags=doc.get("tags", []),
            likes=doc.get("likes", 0),
            likedBy=[str(uid) for uid in doc.get("likedBy", [])],
            comments=doc.get("comments", 0),
            isPublished=doc.get("isPublished", True),
            createdAt=doc["createdAt"],
            updatedAt=doc.get("updatedAt", doc["createdAt"]),
        )


class PostWithComments(PostOut):
    commentsData: List[CommentOut] = []


class LikeStatus(BaseModel):
    isLiked: bool
    likes: int


class LikeToggleResponse(LikeStatus):
    message: str


class TagCount(BaseModel):
    tag: str
    count: int


class UserStats(BaseModel):
    totalPosts: int = 0
    publishedPosts: int = 0
    totalLikes: int = 0
    totalComments: int = 0


class AppStats(BaseModel):
    totalPosts: int = 0
    totalUsers: int = 0
    totalLikes: int = 0
    totalComments: int = 0
    totalInteractions: int = 0
    appStatus: str = "Active"
