"""
Application errors.

Each error carries the HTTP status it maps to and a human readable message.
The handlers installed in ``main.py`` turn them into ``{"error": message}``.
"""


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class DuplicateUser(AppError):
    status_code = 400
    message = "User already exists"


class InvalidCredentials(AppError):
    status_code = 400
    message = "Invalid email or password"


class TokenInvalid(AppError):
    status_code = 400
    message = "Password reset token is invalid or has expired"


class PasswordMismatch(AppError):
    status_code = 400
    message = "Passwords do not match"


class PasswordTooShort(AppError):
    status_code = 400
    message = "Password must be at least 6 characters long"


class Unauthorized(AppError):
    status_code = 401
    message = "Access token required"


class Forbidden(AppError):
    status_code = 403
    message = "Invalid or expired token"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class NotFoundOrForbidden(NotFound):
    message = "Post not found or you are not authorized to modify this post"


class ServiceUnavailable(AppError):
    status_code = 500
    message = "Service temporarily unavailable. Please try again later."


class InternalError(AppError):
    status_code = 500
