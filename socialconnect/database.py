import logging

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .config import Settings
from .errors import NotFound

logger = logging.getLogger(__name__)


def get_database(settings: Settings) -> Database:
    client = MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)
    logger.info("Using MongoDB database %s", settings.DB_NAME)
    return client[settings.DB_NAME]


def ensure_indexes(db: Database) -> None:
    db.users.create_index([("username", ASCENDING)], unique=True)
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.users.create_index([("resetPasswordToken", ASCENDING)])
    db.posts.create_index([("authorId", ASCENDING), ("createdAt", DESCENDING)])
    db.posts.create_index([("isPublished", ASCENDING), ("createdAt", DESCENDING)])
    db.comments.create_index([("postId", ASCENDING), ("createdAt", DESCENDING)])


def parse_object_id(value: str, what: str = "Resource") -> ObjectId:
    """Malformed ids can never match a document, so they read as missing."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFound(f"{what} not found")
