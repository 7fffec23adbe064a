from pydantic import BaseModel, EmailStr
from typing import Optional

# Request bodies accept missing fields so the routes can answer with a
# plain 400 message instead of a schema dump.


class UserCreate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: Optional[EmailStr] = None


class ResetPasswordRequest(BaseModel):
    password: Optional[str] = None
    confirmPassword: Optional[str] = None


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    firstName: str = ""
    lastName: str = ""
    fullName: str = ""


class AuthResponse(BaseModel):
    message: str
    user: UserOut
    token: str


class ProfileResponse(BaseModel):
    user: UserOut


class MessageResponse(BaseModel):
    message: str


class ResetTokenStatus(BaseModel):
    message: str
    email: str
