"""Bearer-token authentication.

Tokens are signed with the app ``SECRET_KEY`` (itsdangerous) and carry only
the user id. The caller identity used by every user-scoped operation comes
from here, never from request bodies.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from lottery_app.db import get_session
from lottery_app.errors import ForbiddenError, UnauthorizedError
from lottery_app.models.user import User
from lottery_app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_SALT = "lottery-auth"
_users = UserRepository()


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=_SALT)


def issue_token(user: User) -> str:
    return _serializer().dumps({"uid": user.id})


def verify_token(token: str) -> str:
    """Return the user id encoded in ``token``."""

    max_age = int(current_app.config.get("AUTH_TOKEN_MAX_AGE", 7 * 24 * 3600))
    try:
        payload = _serializer().loads(token, max_age=max_age)
    except SignatureExpired as exc:
        raise UnauthorizedError("Session expired") from exc
    except BadSignature as exc:
        raise UnauthorizedError("Invalid token") from exc

    uid = payload.get("uid") if isinstance(payload, dict) else None
    if not uid:
        raise UnauthorizedError("Invalid token")
    return str(uid)


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Missing bearer token")
    return token.strip()


def authenticate() -> User:
    """Resolve the calling user from the Authorization header."""

    user_id = verify_token(bearer_token())
    user = _users.get_by_id(get_session(), user_id)
    if user is None:
        logger.warning("Token for unknown user %s", user_id)
        raise UnauthorizedError("Invalid token")
    return user


def current_user() -> User:
    user: User | None = getattr(g, "current_user", None)
    if user is None:
        raise UnauthorizedError()
    return user


def login_required(view: F) -> F:
    @wraps(view)
    def _wrapped(*args: Any, **kwargs: Any) -> Any:
        g.current_user = authenticate()
        return view(*args, **kwargs)

    return _wrapped  # type: ignore[return-value]


def admin_required(view: F) -> F:
    @wraps(view)
    def _wrapped(*args: Any, **kwargs: Any) -> Any:
        user = authenticate()
        if not user.is_admin:
            raise ForbiddenError()
        g.current_user = user
        return view(*args, **kwargs)

    return _wrapped  # type: ignore[return-value]
