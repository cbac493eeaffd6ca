"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")

    if host and user and database:
        sslmode = os.getenv("PGSSLMODE", "require")
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=_env_int("PGPORT", 5432),
            database=database,
            query={"sslmode": sslmode} if sslmode else {},
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./lottery.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    TESTING: bool = False

    DATABASE_URL: str = resolve_database_url()

    # Bearer tokens issued at login.
    AUTH_TOKEN_MAX_AGE: int = _env_int("AUTH_TOKEN_MAX_AGE", 7 * 24 * 3600)

    # Ticket pool / cart limits
    TICKET_POOL_SIZE: int = _env_int("TICKET_POOL_SIZE", 100)
    TICKET_SEARCH_LIMIT: int = _env_int("TICKET_SEARCH_LIMIT", 10_000)
    MAX_BUNCH_SIZE: int = _env_int("MAX_BUNCH_SIZE", 100)
    MAX_DRAW_DATES: int = _env_int("MAX_DRAW_DATES", 9)

    SETTLEMENT_TIMEOUT_SECONDS: int = _env_int("SETTLEMENT_TIMEOUT_SECONDS", 10)

    # WhatsApp Cloud API
    WHATSAPP_ACCESS_TOKEN: str = os.getenv("WHATSAPP_ACCESS_TOKEN", "")
    WHATSAPP_PHONE_NUMBER_ID: str = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    WHATSAPP_API_BASE: str = os.getenv("WHATSAPP_API_BASE", "https://graph.facebook.com/v18.0")
    DEFAULT_COUNTRY_CODE: str = os.getenv("DEFAULT_COUNTRY_CODE", "91")
    NOTIFY_ON_SETTLEMENT: bool = _env_bool("NOTIFY_ON_SETTLEMENT", True)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """In-memory database, no outbound notifications."""

    APP_ENV: str = "testing"
    DEBUG: bool = False
    TESTING: bool = True
    SECRET_KEY: str = "test-secret"
    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"
    NOTIFY_ON_SETTLEMENT: bool = False
    WHATSAPP_ACCESS_TOKEN: str = ""
    WHATSAPP_PHONE_NUMBER_ID: str = ""


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
