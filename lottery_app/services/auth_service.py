"""Registration, login and profile updates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from lottery_app.errors import ConflictError, UnauthorizedError
from lottery_app.models.user import User
from lottery_app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repository: UserRepository | None = None) -> None:
        self._repo = repository or UserRepository()

    def register(self, session: Session, data: Mapping[str, Any], is_admin: bool = False) -> User:
        email = str(data["email"]).strip().lower()
        if self._repo.get_by_email(session, email) is not None:
            raise ConflictError(message="Email already registered", details={"email": ["Email already registered"]})

        user = self._repo.create(
            session,
            name=str(data["name"]).strip(),
            email=email,
            phone=data.get("phone") or None,
            password_hash=generate_password_hash(str(data["password"])),
            is_admin=is_admin,
        )
        logger.info("Registered user %s", user.id)
        return user

    def login(self, session: Session, email: str, password: str) -> User:
        user = self._repo.get_by_email(session, email)
        if user is None or not check_password_hash(user.password_hash, password):
            raise UnauthorizedError("Invalid email or password")
        return user

    def update_profile(self, session: Session, user: User, data: Mapping[str, Any]) -> User:
        if "email" in data:
            email = str(data["email"]).strip().lower()
            other = self._repo.get_by_email(session, email)
            if other is not None and other.id != user.id:
                raise ConflictError(message="Email already registered", details={"email": ["Email already registered"]})
            user.email = email
        if "name" in data:
            user.name = str(data["name"]).strip()
        if "phone" in data:
            user.phone = data["phone"] or None
        session.flush()
        return user
