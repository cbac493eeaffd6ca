"""Repository layer for user persistence."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery_app.models.user import User


class UserRepository:
    """CRUD operations for User."""

    def get_by_id(self, session: Session, user_id: str) -> User | None:
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return session.scalars(stmt).first()

    def create(self, session: Session, **fields: object) -> User:
        user = User(**fields)
        session.add(user)
        session.flush()  # assign PK / surface unique violations
        return user

    def count(self, session: Session) -> int:
        return int(session.scalar(select(func.count()).select_from(User)) or 0)
