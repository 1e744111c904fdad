"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def engine_options(
    database_url: str,
    *,
    pool_timeout: int,
    statement_timeout_ms: int,
) -> dict[str, Any]:
    """Build ``SQLALCHEMY_ENGINE_OPTIONS`` bounding every store call.

    Parameters
    ----------
    database_url: str
        Connection string the options are computed for.
    pool_timeout: int
        Seconds to wait for a pooled connection before giving up.
    statement_timeout_ms: int
        Server-side statement timeout applied on PostgreSQL connections.

    Returns
    -------
    dict[str, Any]
        Keyword arguments forwarded to :func:`sqlalchemy.create_engine`.

    Notes
    -----
    SQLite has no connection pool wait nor server-side statement timeout; the
    driver's lock wait (``timeout``) is bounded instead.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"timeout": pool_timeout}}

    options: dict[str, Any] = {"pool_pre_ping": True, "pool_timeout": pool_timeout}
    if database_url.startswith("postgresql"):
        options["connect_args"] = {"options": f"-c statement_timeout={statement_timeout_ms}"}
    return options


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing. Defaults to a development-safe
        placeholder and should be overridden in production.
    JWT_SECRET_KEY: str
        Server-held secret used to sign and verify access/refresh tokens.
    JWT_ALGORITHM: str
        Signing algorithm used by ``flask-jwt-extended``.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method; ``scrypt`` unless overridden.
    PASSWORD_PEPPER: str
        Optional server-side secret appended to passwords before hashing.
    ACCESS_TOKEN_SECONDS: int
        Lifetime of an access token.
    REFRESH_TOKEN_SECONDS: int
        Lifetime of a refresh token; must exceed ``ACCESS_TOKEN_SECONDS``.
    TOKEN_GC_ENABLED: bool
        Starts the periodic expired-token sweep with the application.
    TOKEN_GC_INTERVAL_MINUTES: int
        Interval between two sweeps.
    TOKEN_GC_LOCK_SECONDS: int
        Lease of the cross-process sweep lock (Redis only).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Engine options bounding pool waits and statement duration.
    STORE_RETRY_ATTEMPTS: int
        Attempts made by read operations when the store is unavailable.
    REDIS_URL: str | None
        Optional Redis connection string used for the sweep lock and the
        rate limiter storage.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter expression applied to the login endpoint.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", os.getenv("JWT_TOKEN_SECRET_KEY", "CHANGE_ME_JWT"))
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_TOKEN_LOCATION = ["headers"]

    # Password hashing (Werkzeug method string)
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")
    PASSWORD_PEPPER = os.getenv("PASSWORD_PEPPER", "")

    # Token lifetimes
    ACCESS_TOKEN_SECONDS = env_int("ACCESS_TOKEN_SECONDS", 900)
    REFRESH_TOKEN_SECONDS = env_int("REFRESH_TOKEN_SECONDS", 604800)

    # Expired-token sweep
    TOKEN_GC_ENABLED = env_bool("TOKEN_GC_ENABLED", True)
    TOKEN_GC_INTERVAL_MINUTES = env_int("TOKEN_GC_INTERVAL_MINUTES", 10)
    TOKEN_GC_LOCK_SECONDS = env_int("TOKEN_GC_LOCK_SECONDS", 300)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    DB_POOL_TIMEOUT = env_int("DB_POOL_TIMEOUT", 5)
    DB_STATEMENT_TIMEOUT_MS = env_int("DB_STATEMENT_TIMEOUT_MS", 5000)
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(
        SQLALCHEMY_DATABASE_URI,
        pool_timeout=DB_POOL_TIMEOUT,
        statement_timeout_ms=DB_STATEMENT_TIMEOUT_MS,
    )
    STORE_RETRY_ATTEMPTS = env_int("STORE_RETRY_ATTEMPTS", 3)

    # Redis & rate limiting
    REDIS_URL = os.getenv("REDIS_URL") or None
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", REDIS_URL or "memory://")

    # Flask & JSON
    JSON_SORT_KEYS = False
    JSON_AS_ASCII = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never starts the background sweep nor rate limits requests.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(
        SQLALCHEMY_DATABASE_URI,
        pool_timeout=BaseConfig.DB_POOL_TIMEOUT,
        statement_timeout_ms=BaseConfig.DB_STATEMENT_TIMEOUT_MS,
    )
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy-0123456789"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    TOKEN_GC_ENABLED = False
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    STORE_RETRY_ATTEMPTS = 2
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
