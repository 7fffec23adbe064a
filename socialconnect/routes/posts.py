import logging

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database
from typing import List, Optional

from ..crud import comments, posts
from ..models.post import (
    CommentCreate,
    CommentOut,
    LikeStatus,
    LikeToggleResponse,
    PostCreate,
    PostOut,
    PostWithComments,
    TagCount,
)
from ..models.user import MessageResponse
from .deps import get_current_user, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


# --- Reading ---
@router.get("", response_model=List[PostOut])
def get_posts(
    search: Optional[str] = None,
    filter: Optional[str] = Query(None, description="all, recent or popular"),
    limit: int = posts.DEFAULT_LIMIT,
    page: int = 1,
    db: Database = Depends(get_db),
):
    docs = posts.list_posts(db, filter=filter, search=search, page=page, limit=limit)
    logger.info("Fetched %d posts", len(docs))
    return [PostOut.from_doc(doc) for doc in docs]


# Declared before /{post_id} so "trending" is not taken for an id
@router.get("/trending/tags", response_model=List[TagCount])
def get_trending_tags(db: Database = Depends(get_db)):
    return posts.trending_tags(db)


@router.get("/{post_id}", response_model=PostWithComments)
def get_post(post_id: str, db: Database = Depends(get_db)):
    post = posts.get_post(db, post_id)
    comment_docs = comments.list_comments(db, post_id)
    return PostWithComments(
        **PostOut.from_doc(post).model_dump(),
        commentsData=[CommentOut.from_doc(c) for c in comment_docs],
    )


# --- Writing ---
@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(body: PostCreate, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    post = posts.create_post(
        db,
        current_user,
        title=body.title,
        content=body.content,
        image=body.image,
        tags=body.tags,
    )
    return PostOut.from_doc(post)


# --- Likes ---
@router.post("/{post_id}/toggle-like", response_model=LikeToggleResponse)
def toggle_like(post_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    result = posts.toggle_like(db, current_user, post_id)
    message = "Post liked!" if result["isLiked"] else "Post unliked!"
    return {"message": message, **result}


@router.get("/{post_id}/like-status", response_model=LikeStatus)
def like_status(post_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return posts.like_status(db, current_user, post_id)


# --- Comments ---
@router.post("/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: str,
    body: CommentCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    comment = comments.add_comment(db, current_user, post_id, body.content)
    return CommentOut.from_doc(comment)


@router.get("/{post_id}/comments", response_model=List[CommentOut])
def get_comments(post_id: str, db: Database = Depends(get_db)):
    return [CommentOut.from_doc(c) for c in comments.list_comments(db, post_id)]


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
def delete_comment(comment_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    comments.delete_comment(db, current_user, comment_id)
    return {"message": "Comment deleted successfully"}
