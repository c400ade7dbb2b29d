import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from taskflow import __version__
from taskflow.config import Settings, load_settings
from taskflow.database import Database
from taskflow.errors import install_error_handlers
from taskflow.ratelimit import DEFAULT_AUTH_RATE_LIMIT, create_limiter
from taskflow.routers import auth, tasks
from taskflow.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.database.ping()
    logger.info("TaskFlow API %s started", __version__)
    yield
    app.state.database.dispose()


def create_app(settings: Settings = None) -> FastAPI:
    """Build the application and its store handle.

    The database is opened and its tables created here; the lifespan
    disposes the engine at shutdown.
    """
    settings = settings or load_settings()

    database = Database(
        settings.database_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
    )
    # Create tables
    database.create_all()

    if not settings.tasks_scope_to_owner:
        logger.warning(
            "Task list/update/delete are not restricted to the task owner; "
            "set TASKS_SCOPE_TO_OWNER=true to enforce ownership"
        )

    app = FastAPI(title="TaskFlow API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.token_expire_minutes,
    )

    limiter = create_limiter()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    install_error_handlers(app)

    # Add security middlewares
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

    app.include_router(auth.create_router(limiter, settings.auth_rate_limit or DEFAULT_AUTH_RATE_LIMIT))
    app.include_router(tasks.router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
