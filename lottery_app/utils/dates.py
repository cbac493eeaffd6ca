"""Date helpers shared by routes and services."""

from __future__ import annotations

from datetime import date, datetime, time

from lottery_app.errors import ValidationError


def parse_day(raw: str, field: str = "date") -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValidationError(f"{field} must be YYYY-MM-DD", details={field: ["Not a valid date."]}) from exc


def day_bounds(start: date, end: date | None = None) -> tuple[datetime, datetime]:
    """Inclusive ``[start 00:00, end 23:59:59.999999]``."""

    last = end or start
    if last < start:
        raise ValidationError("end must not be before start", details={"end": ["Must be on or after start."]})
    return datetime.combine(start, time.min), datetime.combine(last, time.max)
