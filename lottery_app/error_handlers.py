"""Map exceptions to the JSON error envelope.

Every handler rolls the request session back before responding: Flask tears
the request down as successful once an error is handled, and a failed
mutation must not be committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from flask import Blueprint, Flask
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from lottery_app.db import rollback_session
from lottery_app.errors import AppError, ConflictError, NotFoundError, ValidationError
from lottery_app.utils.responses import fail, fail_flat

logger = logging.getLogger(__name__)

Renderer = Callable[[str, str, int, Any], Any]


def _respond(error: AppError, render: Renderer = fail):
    rollback_session()
    if error.status_code >= 500:
        logger.error("%s: %s", error.code, error.message)
    else:
        logger.info("%s (%d): %s", error.code, error.status_code, error.message)
    return render(error.code, error.message, error.status_code, error.details)


def _install(target: Flask | Blueprint, render: Renderer) -> None:
    @target.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        return _respond(exc, render)

    @target.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        return _respond(ValidationError(details=exc.messages), render)

    @target.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        logger.warning("Integrity error: %s", exc.orig or exc)
        return _respond(ConflictError(details=str(exc.orig) if exc.orig else str(exc)), render)

    @target.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(exc.code or 500)
        if status == 404:
            return _respond(NotFoundError(), render)
        name = (exc.name or "http_error").lower().replace(" ", "_")
        return _respond(AppError(code=name, message=exc.description or "HTTP error", status_code=status), render)

    @target.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        return _respond(AppError(code="internal_error", message="Internal server error", status_code=500), render)


def register_error_handlers(app: Flask) -> None:
    _install(app, fail)


def register_flat_error_handlers(blueprint: Blueprint) -> None:
    """Errors of ``blueprint`` carry the message string in ``error``."""

    _install(blueprint, fail_flat)
