import logging

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from ..config import Settings
from ..errors import ServiceUnavailable

logger = logging.getLogger(__name__)

_STYLE = """
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6;
           color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: linear-gradient(135deg, %(start)s 0%%, %(end)s 100%%); color: white;
              padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .content { background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }
    .button { display: inline-block; background: linear-gradient(135deg, #667eea 0%%, #764ba2 100%%);
              color: white !important; padding: 15px 30px; text-decoration: none;
              border-radius: 5px; font-weight: bold; margin: 20px 0; }
    .notice { padding: 15px; border-radius: 5px; margin: 20px 0; }
    .warning { background: #fff3cd; border: 1px solid #ffeaa7; color: #856404; }
    .success { background: #d4edda; border: 1px solid #c3e6cb; color: #155724; }
    .footer { text-align: center; font-size: 14px; color: #666; margin-top: 30px; }
"""

RESET_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Password Reset</title><style>{style}</style></head>
<body>
  <div class="header"><h1>Password Reset Request</h1></div>
  <div class="content">
    <h2>Hello {first_name}!</h2>
    <p>We received a request to reset your password for your Social Connect account.</p>
    <p>Click the button below to reset your password:</p>
    <div style="text-align: center;"><a href="{reset_url}" class="button">Reset Your Password</a></div>
    <div class="notice warning">
      <strong>Important:</strong>
      <ul>
        <li>This link will expire in {minutes} minutes for security reasons</li>
        <li>If you didn't request this reset, please ignore this email</li>
        <li>Never share this link with anyone</li>
      </ul>
    </div>
    <p>If the button doesn't work, copy and paste this link into your browser:</p>
    <p style="word-break: break-all; background: #fff; padding: 10px; border-radius: 5px;">{reset_url}</p>
    <p>Best regards,<br>The Social Connect Team</p>
  </div>
  <div class="footer"><p>This is an automated message. Please do not reply to this email.</p></div>
</body>
</html>
"""

CONFIRMATION_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Password Reset Confirmation</title><style>{style}</style></head>
<body>
  <div class="header"><h1>Password Successfully Reset</h1></div>
  <div class="content">
    <h2>Hello {first_name}!</h2>
    <div class="notice success"><strong>Success!</strong> Your password has been successfully reset.</div>
    <p>You can now log in to your Social Connect account using your new password.</p>
    <p>If you didn't make this change, please contact our support team immediately.</p>
    <p>Best regards,<br>The Social Connect Team</p>
  </div>
</body>
</html>
"""


class Mailer:
    """Transactional email for the password reset flow."""

    def __init__(self, settings: Settings):
        self.client_url = settings.CLIENT_URL.rstrip("/")
        self.reset_minutes = settings.RESET_TOKEN_MINUTES
        conf = ConnectionConfig(
            MAIL_USERNAME=settings.MAIL_USERNAME,
            MAIL_PASSWORD=settings.MAIL_PASSWORD,
            MAIL_FROM=settings.MAIL_FROM,
            MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
            MAIL_PORT=settings.MAIL_PORT,
            MAIL_SERVER=settings.MAIL_SERVER,
            MAIL_STARTTLS=settings.MAIL_STARTTLS,
            MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
            USE_CREDENTIALS=True,
            SUPPRESS_SEND=settings.MAIL_SUPPRESS_SEND,
        )
        self.fast_mail = FastMail(conf)

    def reset_url(self, token: str) -> str:
        return f"{self.client_url}/reset-password/{token}"

    def build_reset_email(self, email: str, token: str, first_name: str) -> MessageSchema:
        body = RESET_TEMPLATE.format(
            style=_STYLE % {"start": "#667eea", "end": "#764ba2"},
            first_name=first_name,
            reset_url=self.reset_url(token),
            minutes=self.reset_minutes,
        )
        return MessageSchema(
            subject="Password Reset Request - Social Connect",
            recipients=[email],
            body=body,
            subtype=MessageType.html,
        )

    def build_confirmation_email(self, email: str, first_name: str) -> MessageSchema:
        body = CONFIRMATION_TEMPLATE.format(
            style=_STYLE % {"start": "#28a745", "end": "#20c997"},
            first_name=first_name,
        )
        return MessageSchema(
            subject="Password Successfully Reset - Social Connect",
            recipients=[email],
            body=body,
            subtype=MessageType.html,
        )

    async def send_password_reset(self, email: str, token: str, first_name: str) -> None:
        """Send the reset link. Raises ServiceUnavailable if the mail cannot go out."""
        try:
            message = self.build_reset_email(email, token, first_name)
            await self.fast_mail.send_message(message)
        except Exception:
            logger.exception("Failed to send password reset email to %s", email)
            raise ServiceUnavailable("Failed to send reset email. Please try again later.")
        logger.info("Password reset email sent to %s", email)

    async def send_reset_confirmation(self, email: str, first_name: str) -> bool:
        """Courtesy email after a reset. Failures are logged, never raised."""
        try:
            message = self.build_confirmation_email(email, first_name)
            await self.fast_mail.send_message(message)
        except Exception:
            logger.exception("Failed to send password reset confirmation to %s", email)
            return False
        logger.info("Password reset confirmation sent to %s", email)
        return True
