"""ORM models."""

from lottery_app.models.base import Base
from lottery_app.models.cart_item import CartItem
from lottery_app.models.lottery import Lottery, LotteryStatus, LotteryType, PrizeTier
from lottery_app.models.lottery_result import LotteryResult, ResultWinner
from lottery_app.models.order import BookedTicket, Order
from lottery_app.models.user import User
from lottery_app.models.withdrawal import WithdrawalRequest, WithdrawalStatus

__all__ = [
    "Base",
    "BookedTicket",
    "CartItem",
    "Lottery",
    "LotteryResult",
    "LotteryStatus",
    "LotteryType",
    "Order",
    "PrizeTier",
    "ResultWinner",
    "User",
    "WithdrawalRequest",
    "WithdrawalStatus",
]
