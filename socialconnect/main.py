import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .database import ensure_indexes, get_database
from .errors import AppError
from .logging_config import setup_logging
from .routes import auth, home, my_posts, posts
from .utils.mail import Mailer
from .utils.tokens import TokenService

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None,
               mailer: Optional[Mailer] = None) -> FastAPI:
    """
    Build the application.

    Everything process-wide (settings, database handle, token service,
    mailer) is created here once and stored on ``app.state``; routes get
    them through the dependencies in ``routes/deps.py``.
    """
    settings = settings or load_settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_indexes(app.state.db)
        logger.info("%s started", settings.APP_NAME)
        yield
        logger.info("%s shutting down", settings.APP_NAME)

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db if db is not None else get_database(settings)
    app.state.tokens = TokenService(settings)
    app.state.mailer = mailer or Mailer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(posts.router)
    app.include_router(my_posts.router)
    app.include_router(home.router)

    @app.get("/health")
    def health_check():
        return {"status": "Server is running!", "timestamp": datetime.utcnow()}

    return app


app = create_app()
