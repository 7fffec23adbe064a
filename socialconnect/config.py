from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing import Annotated, List
import os

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))


class Settings(BaseSettings):
    APP_NAME: str = "Social Connect API"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database
    MONGO_URI: str = "mongodb://localhost:27017"
    DB_NAME: str = "social_media_app"
    MONGO_TIMEOUT_MS: int = 5000

    # Tokens
    JWT_SECRET: str = "your-secret-key-change-this-in-production"
    JWT_ALGORITHM: str = "HS256"
    SESSION_TOKEN_DAYS: int = 7
    RESET_TOKEN_MINUTES: int = 10

    # Reset links point at the frontend
    CLIENT_URL: str = "http://localhost:3000"

    # Mail
    MAIL_USERNAME: str = "test@example.com"
    MAIL_PASSWORD: str = "password"
    MAIL_FROM: str = "test@example.com"
    MAIL_FROM_NAME: str = "Social Connect"
    MAIL_PORT: int = 587
    MAIL_SERVER: str = "smtp.example.com"
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    MAIL_SUPPRESS_SEND: bool = False

    # Comma separated in the environment
    CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",  # React dev server
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(case_sensitive=True)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


def load_settings() -> Settings:
    """Build settings from the environment as it is right now."""
    return Settings()
