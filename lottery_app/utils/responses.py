"""JSON envelope shared by every endpoint.

Success: ``{"success": true, "data": ..., "error": null}``
Failure: ``{"success": false, "data": null, "error": {"code", "message", "details"}}``
Flat failure: ``{"success": false, "data": null, "error": message, "code", "details"}``
"""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def _envelope(data: Any, error: dict[str, Any] | None, extra: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"success": error is None, "data": data, "error": error}
    body.update(extra)
    return body


def ok(data: Any, status_code: int = 200, **top_level: Any) -> tuple[Response, int]:
    """Success response; ``top_level`` keys sit beside ``data``."""

    return jsonify(_envelope(data, None, top_level)), status_code


def created(data: Any) -> tuple[Response, int]:
    return ok(data, status_code=201)


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    error = {"code": code, "message": message, "details": details}
    return jsonify(_envelope(None, error, {})), status_code


def fail_flat(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    """Failure with ``error`` as the message; ``code`` and ``details`` are siblings."""

    body = {"success": False, "data": None, "error": message, "code": code, "details": details}
    return jsonify(body), status_code
