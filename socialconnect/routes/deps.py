from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database
from typing import Optional

from ..crud import users
from ..errors import Forbidden, Unauthorized
from ..utils.mail import Mailer
from ..utils.tokens import TokenService

# auto_error=False: a missing header must be a 401 with our own message
security = HTTPBearer(auto_error=False)


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Database = Depends(get_db),
    tokens: TokenService = Depends(get_tokens),
) -> dict:
    """
    Resolve the bearer token to a user document (password hash excluded).

    Missing token -> 401. Bad or expired token, or a token for a user that
    no longer exists -> 403.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access token required")
    payload = tokens.verify_session_token(credentials.credentials)
    user_doc = users.get_by_id(db, payload["sub"])
    if not user_doc:
        raise Forbidden("User not found")
    return user_doc
