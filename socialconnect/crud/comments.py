import logging
from datetime import datetime
from typing import List

from pymongo import DESCENDING
from pymongo.database import Database

from ..database import parse_object_id
from ..errors import Forbidden, NotFound, ValidationError
from .posts import ensure_post_exists
from .users import full_name

logger = logging.getLogger(__name__)

CONTENT_MAX = 500


def add_comment(db: Database, user: dict, post_id: str, content: str) -> dict:
    """
    Store a comment and bump the parent's ``comments`` counter.

    The insert and the counter bump are two separate writes; a crash in
    between leaves the counter one short.
    """
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment content is required")
    if len(content) > CONTENT_MAX:
        raise ValidationError(f"Comment must be at most {CONTENT_MAX} characters")

    post_oid = parse_object_id(post_id, "Post")
    ensure_post_exists(db, post_oid)

    comment_doc = {
        "content": content,
        "author": full_name(user) or user["username"],
        "authorId": user["_id"],
        "authorUsername": user["username"],
        "postId": post_oid,
        "createdAt": datetime.utcnow(),
    }
    result = db.comments.insert_one(comment_doc)
    comment_doc["_id"] = result.inserted_id

    db.posts.update_one({"_id": post_oid}, {"$inc": {"comments": 1}})
    logger.info("Comment %s added to post %s by %s", result.inserted_id, post_oid, user["username"])
    return comment_doc


def list_comments(db: Database, post_id: str) -> List[dict]:
    try:
        post_oid = parse_object_id(post_id, "Post")
    except NotFound:
        return []
    return list(db.comments.find({"postId": post_oid}).sort("createdAt", DESCENDING))


def delete_comment(db: Database, user: dict, comment_id: str) -> None:
    comment = db.comments.find_one({"_id": parse_object_id(comment_id, "Comment")})
    if not comment:
        raise NotFound("Comment not found")
    if comment["authorId"] != user["_id"]:
        raise Forbidden("You can only delete your own comments")

    db.comments.delete_one({"_id": comment["_id"]})
    # The filter keeps the counter from going below zero
    db.posts.update_one(
        {"_id": comment["postId"], "comments": {"$gt": 0}},
        {"$inc": {"comments": -1}},
    )
    logger.info("Comment %s deleted by %s", comment["_id"], user["username"])
