from fastapi import APIRouter, Depends, status
from pymongo.database import Database
from typing import List

from ..crud import posts
from ..models.post import PostCreate, PostOut, PostUpdate, UserStats
from .deps import get_current_user, get_db

# Every route here acts on the caller's own posts
router = APIRouter(prefix="/api/my-posts", tags=["my-posts"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[PostOut])
def get_my_posts(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return [PostOut.from_doc(doc) for doc in posts.list_user_posts(db, current_user)]


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_my_post(body: PostCreate, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    post = posts.create_post(
        db,
        current_user,
        title=body.title,
        content=body.content,
        image=body.image,
        tags=body.tags,
        is_published=True,
    )
    return PostOut.from_doc(post)


@router.get("/stats", response_model=UserStats)
def get_my_stats(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return posts.user_stats(db, current_user)


@router.get("/{post_id}", response_model=PostOut)
def get_my_post(post_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return PostOut.from_doc(posts.get_user_post(db, current_user, post_id))


@router.put("/{post_id}", response_model=PostOut)
def update_my_post(
    post_id: str,
    body: PostUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    post = posts.update_post(db, current_user, post_id, body.model_dump(exclude_unset=True))
    return PostOut.from_doc(post)


@router.delete("/{post_id}", response_model=List[PostOut])
def delete_my_post(post_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    remaining = posts.delete_post(db, current_user, post_id)
    return [PostOut.from_doc(doc) for doc in remaining]
