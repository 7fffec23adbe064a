import logging

from fastapi import APIRouter, Depends, status
from pymongo.database import Database
from starlette.concurrency import run_in_threadpool

from ..crud import users
from ..errors import NotFound, PasswordMismatch, TokenInvalid, ValidationError
from ..models.user import (
    AuthResponse,
    ForgotPasswordRequest,
    MessageResponse,
    ProfileResponse,
    ResetPasswordRequest,
    ResetTokenStatus,
    UserCreate,
    UserLogin,
)
from ..utils.mail import Mailer
from ..utils.passwords import check_password_strength
from ..utils.tokens import TokenService, hash_reset_token
from .deps import get_current_user, get_db, get_mailer, get_tokens

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, we have sent a password reset link."


def mask_email(email: str) -> str:
    """``alice@x.com`` -> ``a***e@x.com``; short local parts keep only the first letter."""
    local, _, domain = email.partition("@")
    if len(local) <= 2:
        masked = local[:1] + "***"
    else:
        masked = f"{local[0]}***{local[-1]}"
    return f"{masked}@{domain}"


# ----------------- REGISTER & LOGIN -----------------
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Database = Depends(get_db), tokens: TokenService = Depends(get_tokens)):
    fields = [body.username, body.email, body.password, body.firstName, body.lastName]
    if not all(value and value.strip() for value in fields):
        raise ValidationError("All fields are required")
    check_password_strength(body.password)

    user_doc = users.create_user(
        db,
        username=body.username.strip(),
        email=body.email,
        password=body.password,
        first_name=body.firstName.strip(),
        last_name=body.lastName.strip(),
    )
    token = tokens.issue_session_token(str(user_doc["_id"]), user_doc["username"])
    return {"message": "User registered successfully", "user": users.public_user(user_doc), "token": token}


@router.post("/login", response_model=AuthResponse)
def login(body: UserLogin, db: Database = Depends(get_db), tokens: TokenService = Depends(get_tokens)):
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")
    user_doc = users.authenticate(db, body.email, body.password)
    token = tokens.issue_session_token(str(user_doc["_id"]), user_doc["username"])
    logger.info("User %s logged in", user_doc["username"])
    return {"message": "Login successful", "user": users.public_user(user_doc), "token": token}


# ----------------- PASSWORD RESET -----------------
@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    db: Database = Depends(get_db),
    tokens: TokenService = Depends(get_tokens),
    mailer: Mailer = Depends(get_mailer),
):
    if not body.email or not body.email.strip():
        raise ValidationError("Email is required")

    user_doc = await run_in_threadpool(users.find_by_email, db, body.email)
    if not user_doc:
        # Same answer as for a real account
        return {"message": FORGOT_PASSWORD_MESSAGE}

    plain, hashed, expires = tokens.issue_reset_token()
    await run_in_threadpool(users.set_reset_token, db, user_doc["_id"], hashed, expires)
    logger.info("Password reset requested for user %s", user_doc["username"])

    # Raises ServiceUnavailable, which the caller sees as a 500
    await mailer.send_password_reset(user_doc["email"], plain, user_doc.get("firstName", ""))
    return {"message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(
    token: str,
    body: ResetPasswordRequest,
    db: Database = Depends(get_db),
    tokens: TokenService = Depends(get_tokens),
    mailer: Mailer = Depends(get_mailer),
):
    if not body.password or not body.confirmPassword:
        raise ValidationError("Password and confirm password are required")
    if body.password != body.confirmPassword:
        raise PasswordMismatch()
    check_password_strength(body.password)

    # Store work and bcrypt stay off the event loop; only the mail is awaited
    user_doc = await run_in_threadpool(tokens.verify_reset_token, db, token)
    changed = await run_in_threadpool(
        users.reset_password, db, user_doc["_id"], hash_reset_token(token), body.password
    )
    if not changed:
        raise TokenInvalid()

    await mailer.send_reset_confirmation(user_doc["email"], user_doc.get("firstName", ""))
    return {"message": "Password has been reset successfully! You can now log in with your new password."}


@router.get("/verify-reset-token/{token}", response_model=ResetTokenStatus)
def verify_reset_token(token: str, db: Database = Depends(get_db), tokens: TokenService = Depends(get_tokens)):
    user_doc = tokens.verify_reset_token(db, token)
    return {"message": "Token is valid", "email": mask_email(user_doc["email"])}


# ----------------- PROFILE -----------------
@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    user_doc = users.get_by_id(db, current_user["_id"])
    if not user_doc:
        raise NotFound("User not found")
    return {"user": users.public_user(user_doc)}
