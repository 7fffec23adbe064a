from fastapi import APIRouter, Depends, Request
from pymongo.database import Database

from ..crud import posts
from ..models.post import AppStats
from .deps import get_db

router = APIRouter(prefix="/api", tags=["home"])


@router.get("")
def index(request: Request):
    settings = request.app.state.settings
    return {
        "message": f"Welcome to the {settings.APP_NAME}!",
        "version": settings.VERSION,
        "endpoints": {
            "auth": "/api/auth",
            "posts": "/api/posts",
            "myPosts": "/api/my-posts",
            "stats": "/api/stats",
            "health": "/health",
        },
        "features": [
            "Create and manage posts",
            "Like and comment on posts",
            "Search and filter posts",
            "Trending tags",
            "Password reset by email",
        ],
    }


@router.get("/stats", response_model=AppStats)
def get_stats(db: Database = Depends(get_db)):
    return posts.app_stats(db)
