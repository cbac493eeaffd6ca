"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error.

    ``details`` is a mapping of field name -> list of messages.
    """

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class ConflictError(AppError):
    """Conflict (e.g., unique constraint)."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class UnauthorizedError(AppError):
    """Missing or invalid session credential."""

    def __init__(self, message: str = "Unauthorized", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Authenticated but not allowed (admin-only actions)."""

    def __init__(self, message: str = "Admin privileges required", details: Any | None = None) -> None:
        super().__init__(code="forbidden", message=message, status_code=403, details=details)


class InvalidStateError(AppError):
    """Operation not allowed in the resource's current lifecycle state."""

    def __init__(self, message: str = "Invalid state", details: Any | None = None) -> None:
        super().__init__(code="invalid_state", message=message, status_code=409, details=details)


class EmptyCartError(AppError):
    """Settlement invoked with nothing to settle."""

    def __init__(self, message: str = "Cart is empty or not found", details: Any | None = None) -> None:
        super().__init__(code="empty_cart", message=message, status_code=400, details=details)


class TicketAlreadyBookedError(AppError):
    """One or more (ticket number, draw date) pairs are already taken.

    ``details`` lists the conflicting pairs as ``{"ticket_number", "draw_date"}``.
    """

    def __init__(self, message: str = "Ticket already booked", details: Any | None = None) -> None:
        super().__init__(code="ticket_already_booked", message=message, status_code=409, details=details)


class TicketPoolExhaustedError(AppError):
    """No (or not enough) unbooked numbers within the search bound."""

    def __init__(self, message: str = "No ticket numbers available", details: Any | None = None) -> None:
        super().__init__(code="ticket_pool_exhausted", message=message, status_code=503, details=details)


class SettlementFailedError(AppError):
    """A persistence step failed mid-settlement; nothing was committed."""

    def __init__(self, message: str = "Settlement failed", details: Any | None = None) -> None:
        super().__init__(code="settlement_failed", message=message, status_code=500, details=details)


class NotificationError(AppError):
    """Outbound message could not be delivered."""

    def __init__(self, message: str = "Failed to send notification", details: Any | None = None) -> None:
        super().__init__(code="notification_failed", message=message, status_code=502, details=details)
