"""
Session and password-reset tokens.

Session tokens are HS256 JWTs carrying the user id and username. Expiry is
the only way they stop working; there is no revocation list.

Reset tokens are random hex strings. Only their sha256 digest is stored on
the user record, next to an expiry instant, so a database leak does not
hand out usable reset links.
"""
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Tuple

import jwt
from pymongo.database import Database

from ..config import Settings
from ..crud import users
from ..errors import Forbidden, TokenInvalid

logger = logging.getLogger(__name__)


def hash_reset_token(plain_token: str) -> str:
    return hashlib.sha256(plain_token.encode()).hexdigest()


class TokenService:
    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.session_lifetime = timedelta(days=settings.SESSION_TOKEN_DAYS)
        self.reset_lifetime = timedelta(minutes=settings.RESET_TOKEN_MINUTES)

    # ----------------- SESSION TOKENS -----------------
    def issue_session_token(self, user_id: str, username: str) -> str:
        now = datetime.utcnow()
        payload = {
            "sub": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + self.session_lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_session_token(self, token: str) -> dict:
        """
        Decode a session token.

        Raises:
            Forbidden: bad signature, malformed token, expired token or a
                payload without a subject.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected session token: %s", exc)
            raise Forbidden("Invalid or expired token")
        if not payload.get("sub"):
            raise Forbidden("Invalid or expired token")
        return payload

    # ----------------- RESET TOKENS -----------------
    def issue_reset_token(self) -> Tuple[str, str, datetime]:
        """Return ``(plain, hashed, expires)``. Only the plain token leaves the server."""
        plain = secrets.token_hex(32)
        return plain, hash_reset_token(plain), datetime.utcnow() + self.reset_lifetime

    def verify_reset_token(self, db: Database, plain_token: str) -> dict:
        user = users.find_by_reset_token(db, hash_reset_token(plain_token), datetime.utcnow())
        if not user:
            # Unknown and expired look the same to the caller
            raise TokenInvalid()
        return user
