"""Auction use cases: creation, lookups and winner resolution."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from . import logger
from .bid_usecase import BidOutput
from .entities import Auction, Bid, create_auction
from .errors import InternalError


class AuctionRepository(Protocol):
    def create_auction(self, auction: Auction) -> None: ...

    def find_auction_by_id(self, auction_id: str) -> Auction: ...

    def find_auctions(self, status: int, category: str, product_name: str) -> list[Auction]: ...


class WinningBidRepository(Protocol):
    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid: ...


@dataclass(frozen=True)
class AuctionInput:
    """An auction as submitted by a client."""

    product_name: str
    category: str
    description: str
    condition: int = 0


@dataclass(frozen=True)
class AuctionOutput:
    """A stored auction as returned to a client."""

    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: int
    timestamp: datetime

    @classmethod
    def from_entity(cls, auction: Auction) -> AuctionOutput:
        return cls(
            id=auction.id,
            product_name=auction.product_name,
            category=auction.category,
            description=auction.description,
            condition=int(auction.condition),
            status=int(auction.status),
            timestamp=auction.timestamp,
        )

    def to_dict(self) -> dict:
        """Return the JSON body for this auction."""
        return {
            "id": self.id,
            "product_name": self.product_name,
            "category": self.category,
            "description": self.description,
            "condition": self.condition,
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class WinningInfoOutput:
    """An auction together with its highest bid, if any."""

    auction: AuctionOutput
    bid: BidOutput | None = None

    def to_dict(self) -> dict:
        """Return the JSON body, leaving out ``bid`` when there is none."""
        data: dict = {"auction": self.auction.to_dict()}
        if self.bid is not None:
            data["bid"] = self.bid.to_dict()
        return data


class AuctionUseCase:
    """Operations on auctions, backed by auction and bid repositories."""

    def __init__(
        self,
        auction_repository: AuctionRepository,
        bid_repository: WinningBidRepository,
    ) -> None:
        self.auction_repository = auction_repository
        self.bid_repository = bid_repository

    def create_auction(self, auction_input: AuctionInput) -> None:
        """Validate and store a new auction."""
        auction = create_auction(
            auction_input.product_name,
            auction_input.category,
            auction_input.description,
            auction_input.condition,
        )
        self.auction_repository.create_auction(auction)

    def find_auction_by_id(self, auction_id: str) -> AuctionOutput:
        """Return one auction."""
        return AuctionOutput.from_entity(self.auction_repository.find_auction_by_id(auction_id))

    def find_auctions(self, status: int, category: str, product_name: str) -> list[AuctionOutput]:
        """Return the auctions matching the given filters."""
        auctions = self.auction_repository.find_auctions(int(status), category, product_name)
        return [AuctionOutput.from_entity(auction) for auction in auctions]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> WinningInfoOutput:
        """Return an auction and its highest bid; the bid is None if it cannot be found."""
        auction = self.auction_repository.find_auction_by_id(auction_id)
        auction_output = AuctionOutput.from_entity(auction)
        try:
            winning = self.bid_repository.find_winning_bid_by_auction_id(auction.id)
        except InternalError as exc:
            logger.error("", exc)
            return WinningInfoOutput(auction=auction_output, bid=None)
        return WinningInfoOutput(auction=auction_output, bid=BidOutput.from_entity(winning))