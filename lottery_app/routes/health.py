"""Liveness and database reachability."""

from __future__ import annotations

from flask import Blueprint
from sqlalchemy import text

from lottery_app.db import get_session
from lottery_app.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    session = get_session()
    session.execute(text("SELECT 1"))
    return ok({"status": "ok", "database": session.get_bind().dialect.name})
