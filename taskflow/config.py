"""Settings loaded from environment variables (+ optional .env)."""

import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./tasks.db"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, raw, default)
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    if raw.strip() == "*":
        return ["*"]
    return [item.strip() for item in raw.split(",") if item.strip()]


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = os.getenv("DB_HOST")
    if not host:
        return DEFAULT_DATABASE_URL

    user = os.getenv("DB_USER", "")
    password = os.getenv("DB_PASS", "")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "")
    credentials = f"{user}:{password}@" if user else ""
    return f"postgresql+psycopg2://{credentials}{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    db_pool_size: int = 5
    db_pool_timeout: int = 30

    jwt_secret: str = field(default_factory=lambda: secrets.token_urlsafe(32), repr=False)
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = 12

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    allowed_hosts: List[str] = field(default_factory=lambda: ["*"])
    auth_rate_limit: str = "20/minute"

    # Restrict list/update/delete to the requesting user's own tasks.
    tasks_scope_to_owner: bool = False

    log_level: str = "INFO"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from the process environment.

    A .env file (``env_file`` or the default lookup) is loaded first without
    overriding variables that are already set.
    """
    load_dotenv(env_file, override=False)

    secret = os.getenv("JWT_SECRET")
    if not secret:
        logger.warning("JWT_SECRET is not set; using a random per-process secret")
        secret = secrets.token_urlsafe(32)

    return Settings(
        database_url=_database_url(),
        db_pool_size=_env_int("DB_POOL_SIZE", 5),
        db_pool_timeout=_env_int("DB_POOL_TIMEOUT", 30),
        jwt_secret=secret,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        token_expire_minutes=_env_int("TOKEN_EXPIRE_MINUTES", 60 * 24),
        bcrypt_rounds=_env_int("BCRYPT_ROUNDS", 12),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 5000),
        cors_origins=_env_list("CORS_ORIGINS", ["*"]),
        allowed_hosts=_env_list("ALLOWED_HOSTS", ["*"]),
        auth_rate_limit=os.getenv("AUTH_RATE_LIMIT", "20/minute"),
        tasks_scope_to_owner=_env_bool("TASKS_SCOPE_TO_OWNER", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
