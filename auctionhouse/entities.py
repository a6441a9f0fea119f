"""Auction, bid and user entities with their validation rules."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from .errors import BadRequestError

_HEX32 = re.compile(r"[0-9a-fA-F]{32}")
_HEX36 = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


class ProductCondition(IntEnum):
    NEW = 1
    USED = 2
    REFURBISHED = 3


class AuctionStatus(IntEnum):
    ACTIVE = 0
    COMPLETED = 1


def _now() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_uuid(value: str) -> bool:
    """Accept the plain, braced, ``urn:uuid:`` and 32-hex forms of a UUID."""
    if len(value) == 45 and value[:9].lower() == "urn:uuid:":
        value = value[9:]
    elif len(value) == 38 and value.startswith("{") and value.endswith("}"):
        value = value[1:-1]
    if len(value) == 36:
        return _HEX36.fullmatch(value) is not None
    if len(value) == 32:
        return _HEX32.fullmatch(value) is not None
    return False


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


@dataclass
class Auction:
    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: AuctionStatus = AuctionStatus.ACTIVE
    timestamp: datetime = field(default_factory=_now)

    def validate(self) -> None:
        """Raise BadRequestError when the auction is not acceptable."""
        bad_condition = self.condition not in (
            ProductCondition.NEW,
            ProductCondition.REFURBISHED,
            ProductCondition.USED,
        )
        if (
            _byte_len(self.product_name) <= 1
            or _byte_len(self.category) <= 2
            or (_byte_len(self.description) <= 10 and bad_condition)
        ):
            raise BadRequestError("invalid auction object")


@dataclass
class Bid:
    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime = field(default_factory=_now)

    def validate(self) -> None:
        """Raise BadRequestError when the bid is not acceptable."""
        if not is_valid_uuid(self.user_id):
            raise BadRequestError("UserId is not a valid id")
        if not is_valid_uuid(self.auction_id):
            raise BadRequestError("AuctionId is not a valid id")
        if self.amount <= 0:
            raise BadRequestError("Amount is not a valid value")


@dataclass
class User:
    id: str
    name: str


def create_auction(product_name: str, category: str, description: str, condition: int) -> Auction:
    """Create a new active auction, validated."""
    auction = Auction(
        id=str(uuid.uuid4()),
        product_name=product_name,
        category=category,
        description=description,
        condition=condition,
        status=AuctionStatus.ACTIVE,
        timestamp=_now(),
    )
    auction.validate()
    return auction


def create_bid(user_id: str, auction_id: str, amount: float) -> Bid:
    """Create a new bid, validated."""
    bid = Bid(
        id=str(uuid.uuid4()),
        user_id=user_id,
        auction_id=auction_id,
        amount=amount,
        timestamp=_now(),
    )
    bid.validate()
    return bid