"""Logging configuration.

Third-party loggers go through the root ``basicConfig`` handler. The
``lottery_app`` logger gets its own handler whose lines carry the request
method, path and authenticated user id.
"""

from __future__ import annotations

import logging

from flask import Flask, g, has_request_context, request

_HANDLER_NAME = "lottery_app.console"
_APP_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_line)s user=%(user_id)s] %(message)s"


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        request_line = "-"
        user_id = "-"
        if has_request_context():
            request_line = f"{request.method} {request.path}"
            user = g.get("current_user")
            if user is not None:
                user_id = user.id
        record.request_line = request_line
        record.user_id = user_id
        return True


def configure_logging(app: Flask) -> None:
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app_logger = logging.getLogger("lottery_app")
    app_logger.setLevel(level)
    if not any(h.get_name() == _HANDLER_NAME for h in app_logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_APP_FORMAT))
        handler.addFilter(RequestContextFilter())
        app_logger.addHandler(handler)
        app_logger.propagate = False

    # Reduce noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
