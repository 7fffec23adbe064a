import logging
from datetime import datetime
from typing import Optional

from bson.objectid import ObjectId
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..errors import DuplicateUser, InvalidCredentials
from ..utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

# Never hand these out of the store
PRIVATE_FIELDS = {"passwordHash": 0, "resetPasswordToken": 0, "resetPasswordExpires": 0}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def full_name(user: dict) -> str:
    return f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()


def public_user(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "username": user["username"],
        "email": user["email"],
        "firstName": user.get("firstName", ""),
        "lastName": user.get("lastName", ""),
        "fullName": full_name(user),
    }


def create_user(db: Database, username: str, email: str, password: str,
                first_name: str, last_name: str) -> dict:
    """
    Persist a new user. The password is hashed here and never stored as given.

    Raises:
        DuplicateUser: the email or the username is already taken; the
            message says which one.
    """
    email = normalize_email(email)
    existing = db.users.find_one({"$or": [{"email": email}, {"username": username}]})
    if existing:
        if existing["email"] == email:
            raise DuplicateUser("Email already registered")
        raise DuplicateUser("Username already taken")

    user_doc = {
        "username": username,
        "email": email,
        "passwordHash": hash_password(password),
        "firstName": first_name,
        "lastName": last_name,
        "lastLogin": None,
        "resetPasswordToken": None,
        "resetPasswordExpires": None,
        "createdAt": datetime.utcnow(),
    }
    try:
        result = db.users.insert_one(user_doc)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration
        raise DuplicateUser("Email or username already registered")
    user_doc["_id"] = result.inserted_id
    logger.info("Registered user %s", username)
    return user_doc


def find_by_email(db: Database, email: str) -> Optional[dict]:
    return db.users.find_one({"email": normalize_email(email)})


def get_by_id(db: Database, user_id) -> Optional[dict]:
    if not isinstance(user_id, ObjectId):
        if not ObjectId.is_valid(user_id):
            return None
        user_id = ObjectId(user_id)
    return db.users.find_one({"_id": user_id}, PRIVATE_FIELDS)


def authenticate(db: Database, email: str, password: str) -> dict:
    """Check credentials and stamp ``lastLogin``. One error for every failure."""
    user_doc = find_by_email(db, email)
    if not user_doc or not verify_password(password, user_doc["passwordHash"]):
        raise InvalidCredentials()
    now = datetime.utcnow()
    db.users.update_one({"_id": user_doc["_id"]}, {"$set": {"lastLogin": now}})
    user_doc["lastLogin"] = now
    return user_doc


def set_reset_token(db: Database, user_id: ObjectId, hashed_token: str, expires: datetime) -> None:
    # Overwrites any earlier token, so only the latest link works
    db.users.update_one(
        {"_id": user_id},
        {"$set": {"resetPasswordToken": hashed_token, "resetPasswordExpires": expires}},
    )


def find_by_reset_token(db: Database, hashed_token: str, now: datetime) -> Optional[dict]:
    return db.users.find_one({
        "resetPasswordToken": hashed_token,
        "resetPasswordExpires": {"$gt": now},
    })


def reset_password(db: Database, user_id: ObjectId, hashed_token: str, new_password: str) -> bool:
    """
    Swap the password hash and clear the reset fields in one update.

    The filter still requires the token, so two requests racing with the
    same link cannot both succeed. Returns False if the token was already
    consumed.
    """
    result = db.users.update_one(
        {"_id": user_id, "resetPasswordToken": hashed_token},
        {"$set": {
            "passwordHash": hash_password(new_password),
            "resetPasswordToken": None,
            "resetPasswordExpires": None,
        }},
    )
    if result.modified_count:
        logger.info("Password reset for user %s", user_id)
    return bool(result.modified_count)
