"""Seed a development database with an admin account and one open lottery.

Usage:
  python scripts/seed_dev.py --admin-email admin@example.com --admin-password secret123
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from datetime import timedelta
from decimal import Decimal

from dotenv import load_dotenv
from sqlalchemy.orm import Session

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lottery_app.config import resolve_database_url
from lottery_app.db import create_app_engine, make_session_factory
from lottery_app.models import Base, Lottery, LotteryStatus, PrizeTier
from lottery_app.models.base import utcnow
from lottery_app.repositories.user_repository import UserRepository
from lottery_app.services.auth_service import AuthService


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="admin12345")
    parser.add_argument("--admin-name", default="Administrator")
    parser.add_argument("--lottery-name", default="Weekly Draw")
    parser.add_argument("--series-code", default="WK")
    parser.add_argument("--ticket-price", type=Decimal, default=Decimal("50.00"))
    parser.add_argument("--total-tickets", type=int, default=1000)
    parser.add_argument("--days-until-draw", type=int, default=7)
    return parser.parse_args(argv)


def _seed(session: Session, args: argparse.Namespace) -> None:
    users = UserRepository()
    if users.get_by_email(session, args.admin_email) is None:
        AuthService(users).register(
            session,
            {"name": args.admin_name, "email": args.admin_email, "password": args.admin_password, "phone": None},
            is_admin=True,
        )
        print(f"Created admin {args.admin_email}")
    else:
        print(f"Admin {args.admin_email} already exists")

    ticket_price: Decimal = args.ticket_price
    lottery = Lottery(
        name=args.lottery_name,
        draw_date=utcnow().replace(microsecond=0) + timedelta(days=args.days_until_draw),
        ticket_price=ticket_price,
        total_tickets=args.total_tickets,
        series_code=args.series_code,
        number_base=1000,
        status=LotteryStatus.ACTIVE.value,
        prize_tiers=[
            PrizeTier(rank=1, amount=ticket_price * 10000),
            PrizeTier(rank=2, amount=ticket_price * 1000),
            PrizeTier(rank=3, amount=ticket_price * 100),
        ],
    )
    session.add(lottery)
    session.flush()
    print(f"Created lottery {lottery.id} ({lottery.name})")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parse_args(argv)

    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)

    session = make_session_factory(engine)()
    try:
        _seed(session, args)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
