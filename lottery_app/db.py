"""SQLAlchemy engine + session management.

Uses a session-per-request pattern. Services receive the session explicitly;
only the settlement engine commits on its own, everything else is committed
when the request finishes without an error.
"""

from __future__ import annotations

import logging
import os

from flask import Flask, g
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from lottery_app.models.base import Base

logger = logging.getLogger(__name__)


def _generate_rds_iam_token(*, host: str, port: int, user: str, region: str) -> str:
    """Generate an RDS IAM auth token to use as the Postgres password."""

    import boto3

    rds = boto3.client("rds", region_name=region)
    return rds.generate_db_auth_token(
        DBHostname=host,
        Port=port,
        DBUsername=user,
        Region=region,
    )


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app_engine(database_url: str) -> Engine:
    """Build the engine for ``database_url``.

    Postgres URLs without a password use RDS IAM tokens when ``AWS_REGION``
    is set; each new pooled connection gets a fresh token.
    """

    url = make_url(database_url)

    if url.get_backend_name() == "postgresql" and not url.password:
        region = os.getenv("AWS_REGION")
        host = url.host
        username = url.username
        database = url.database

        if region and host and username and database:
            import psycopg2

            port = int(url.port or 5432)
            sslmode = (url.query or {}).get("sslmode") or os.getenv("PGSSLMODE") or "require"

            def _creator() -> object:
                token = _generate_rds_iam_token(host=host, port=port, user=username, region=region)
                return psycopg2.connect(
                    host=host,
                    port=port,
                    user=username,
                    password=token,
                    dbname=database,
                    sslmode=sslmode,
                )

            logger.info("Using RDS IAM authentication for %s@%s", username, host)
            return create_engine("postgresql+psycopg2://", creator=_creator, pool_pre_ping=True)

    if url.get_backend_name() == "sqlite":
        engine = create_engine(database_url)
        _enable_sqlite_foreign_keys(engine)
        return engine

    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(app: Flask) -> None:
    """Initialize database engine and per-request sessions."""

    engine = create_app_engine(str(app.config["DATABASE_URL"]))
    session_factory = make_session_factory(engine)

    # Import models so they register with Base.metadata
    from lottery_app import models  # noqa: F401

    # Create tables for local runs (production would use migrations).
    Base.metadata.create_all(bind=engine)

    app.extensions["engine"] = engine
    app.extensions["session_factory"] = session_factory

    @app.before_request
    def _open_session() -> None:
        g.db = session_factory()  # type: ignore[attr-defined]

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = getattr(g, "db", None)
        if session is None:
            return

        try:
            if exc is None:
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()


def get_session() -> Session:
    """Get the current request's SQLAlchemy session."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        raise RuntimeError("Database session not initialized")
    return session


def rollback_session() -> None:
    """Discard pending changes of the current request, if any.

    Error handlers call this before building the error response so that a
    handled exception never reaches the commit in ``_close_session``.
    """

    session: Session | None = getattr(g, "db", None)
    if session is not None:
        session.rollback()
