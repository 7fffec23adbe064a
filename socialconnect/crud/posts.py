"""
Post storage.

Posts keep a denormalized ``likes`` counter next to the ``likedBy`` array and
a ``comments`` counter maintained by the comment store. Every like toggle is
a single conditional update on the post document, so the counter and the
array move together.
"""
import logging
import re
from datetime import datetime, timedelta
from typing import List, Optional

from bson.objectid import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from ..database import parse_object_id
from ..errors import NotFound, NotFoundOrForbidden, ValidationError
from .users import full_name

logger = logging.getLogger(__name__)

TITLE_MAX = 200
CONTENT_MAX = 2000
DEFAULT_LIMIT = 50
MAX_LIMIT = 100
RECENT_DAYS = 7
POPULAR_MIN_LIKES = 10
TRENDING_LIMIT = 10


def _clean_tags(tags: Optional[List[str]]) -> List[str]:
    return [tag.strip() for tag in tags or [] if tag and tag.strip()]


def _validate_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    if len(title) > TITLE_MAX:
        raise ValidationError(f"Title must be at most {TITLE_MAX} characters")
    return title


def _validate_content(content: Optional[str]) -> str:
    if not content or not content.strip():
        raise ValidationError("Content is required")
    if len(content) > CONTENT_MAX:
        raise ValidationError(f"Content must be at most {CONTENT_MAX} characters")
    return content


def build_list_query(filter: Optional[str] = None, search: Optional[str] = None,
                     now: Optional[datetime] = None) -> dict:
    query = {"isPublished": True}
    if filter == "recent":
        now = now or datetime.utcnow()
        query["createdAt"] = {"$gte": now - timedelta(days=RECENT_DAYS)}
    elif filter == "popular":
        query["likes"] = {"$gte": POPULAR_MIN_LIKES}
    if search and search.strip():
        pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"content": pattern}, {"author": pattern}]
    return query


def list_posts(db: Database, filter: Optional[str] = None, search: Optional[str] = None,
               page: int = 1, limit: int = DEFAULT_LIMIT) -> List[dict]:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_LIMIT)
    cursor = (
        db.posts.find(build_list_query(filter, search))
        .sort("createdAt", DESCENDING)
        .skip((page - 1) * limit)
        .limit(limit)
    )
    return list(cursor)


def get_post(db: Database, post_id: str) -> dict:
    post = db.posts.find_one({"_id": parse_object_id(post_id, "Post")})
    if not post:
        raise NotFound("Post not found")
    return post


def create_post(db: Database, user: dict, title: str, content: str,
                image: Optional[str] = None, tags: Optional[List[str]] = None,
                is_published: bool = True) -> dict:
    now = datetime.utcnow()
    post_doc = {
        "title": _validate_title(title),
        "content": _validate_content(content),
        # Authorship comes from the authenticated user only
        "author": full_name(user) or user["username"],
        "authorId": user["_id"],
        "authorUsername": user["username"],
        "image": image or None,
        "tags": _clean_tags(tags),
        "likes": 0,
        "likedBy": [],
        "comments": 0,
        "isPublished": is_published,
        "createdAt": now,
        "updatedAt": now,
    }
    result = db.posts.insert_one(post_doc)
    post_doc["_id"] = result.inserted_id
    logger.info("Post %s created by %s", result.inserted_id, user["username"])
    return post_doc


def list_user_posts(db: Database, user: dict) -> List[dict]:
    return list(db.posts.find({"authorId": user["_id"]}).sort("createdAt", DESCENDING))


def get_user_post(db: Database, user: dict, post_id: str) -> dict:
    post = db.posts.find_one({"_id": parse_object_id(post_id, "Post"), "authorId": user["_id"]})
    if not post:
        raise NotFoundOrForbidden()
    return post


def update_post(db: Database, user: dict, post_id: str, fields: dict) -> dict:
    """
    Apply the given fields to a post owned by ``user``.

    Ownership and existence are one filter, so a stranger's post and a
    missing post both raise NotFoundOrForbidden.
    """
    try:
        oid = parse_object_id(post_id, "Post")
    except NotFound:
        raise NotFoundOrForbidden()

    changes = {}
    if fields.get("title") is not None:
        changes["title"] = _validate_title(fields["title"])
    if fields.get("content") is not None:
        changes["content"] = _validate_content(fields["content"])
    if "image" in fields:
        changes["image"] = fields["image"] or None
    if fields.get("tags") is not None:
        changes["tags"] = _clean_tags(fields["tags"])
    if fields.get("isPublished") is not None:
        changes["isPublished"] = bool(fields["isPublished"])
    changes["updatedAt"] = datetime.utcnow()

    post = db.posts.find_one_and_update(
        {"_id": oid, "authorId": user["_id"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not post:
        raise NotFoundOrForbidden()
    logger.info("Post %s updated by %s", oid, user["username"])
    return post


def delete_post(db: Database, user: dict, post_id: str) -> List[dict]:
    """Delete a post owned by ``user`` and its comments; return what the user has left."""
    try:
        oid = parse_object_id(post_id, "Post")
    except NotFound:
        raise NotFoundOrForbidden()

    post = db.posts.find_one_and_delete({"_id": oid, "authorId": user["_id"]})
    if not post:
        raise NotFoundOrForbidden()
    db.comments.delete_many({"postId": oid})
    logger.info("Post %s deleted by %s", oid, user["username"])
    return list_user_posts(db, user)


def toggle_like(db: Database, user: dict, post_id: str) -> dict:
    """
    Like the post if ``user`` has not liked it yet, unlike it otherwise.

    Membership test and mutation happen inside one conditional update per
    branch. Two concurrent toggles by the same user may both land; each
    still keeps ``likes == len(likedBy)``.
    """
    oid = parse_object_id(post_id, "Post")
    uid = user["_id"]

    post = db.posts.find_one_and_update(
        {"_id": oid, "likedBy": uid},
        {"$pull": {"likedBy": uid}, "$inc": {"likes": -1}},
        return_document=ReturnDocument.AFTER,
    )
    if post:
        if post["likes"] < 0:
            db.posts.update_one({"_id": oid, "likes": {"$lt": 0}}, {"$set": {"likes": 0}})
            post["likes"] = 0
        return {"isLiked": False, "likes": post["likes"]}

    post = db.posts.find_one_and_update(
        {"_id": oid, "likedBy": {"$ne": uid}},
        {"$addToSet": {"likedBy": uid}, "$inc": {"likes": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if not post:
        # Either the post is gone or a parallel request liked it first
        return like_status(db, user, post_id)
    return {"isLiked": True, "likes": post["likes"]}


def like_status(db: Database, user: dict, post_id: str) -> dict:
    post = get_post(db, post_id)
    return {"isLiked": user["_id"] in post.get("likedBy", []), "likes": post.get("likes", 0)}


def trending_tags(db: Database) -> List[dict]:
    # Ties keep whatever order the server produces
    pipeline = [
        {"$unwind": "$tags"},
        {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": TRENDING_LIMIT},
    ]
    return [{"tag": row["_id"], "count": row["count"]} for row in db.posts.aggregate(pipeline)]


def app_stats(db: Database) -> dict:
    totals = list(db.posts.aggregate([
        {"$group": {"_id": None, "likes": {"$sum": "$likes"}, "comments": {"$sum": "$comments"}}},
    ]))
    total_likes = totals[0]["likes"] if totals else 0
    total_comments = totals[0]["comments"] if totals else 0
    return {
        "totalPosts": db.posts.count_documents({"isPublished": True}),
        "totalUsers": len(db.posts.distinct("authorId")),
        "totalLikes": total_likes,
        "totalComments": total_comments,
        "totalInteractions": total_likes + total_comments,
        "appStatus": "Active",
    }


def user_stats(db: Database, user: dict) -> dict:
    totals = list(db.posts.aggregate([
        {"$match": {"authorId": user["_id"]}},
        {"$group": {
            "_id": None,
            "totalPosts": {"$sum": 1},
            "totalLikes": {"$sum": "$likes"},
            "totalComments": {"$sum": "$comments"},
        }},
    ]))
    stats = totals[0] if totals else {"totalPosts": 0, "totalLikes": 0, "totalComments": 0}
    return {
        "totalPosts": stats["totalPosts"],
        "publishedPosts": db.posts.count_documents({"authorId": user["_id"], "isPublished": True}),
        "totalLikes": stats["totalLikes"],
        "totalComments": stats["totalComments"],
    }


def ensure_post_exists(db: Database, oid: ObjectId) -> None:
    if not db.posts.find_one({"_id": oid}, {"_id": 1}):
        raise NotFound("Post not found")
