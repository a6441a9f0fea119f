"""Persistence of bids in the ``bids`` collection."""

from __future__ import annotations

import math
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

from pymongo.errors import PyMongoError

from . import config, logger
from .entities import AuctionStatus, Bid
from .errors import InternalError, InternalServerError

DEFAULT_AUCTION_INTERVAL = timedelta(minutes=5)
_MAX_WORKERS = 32


def _to_document(bid: Bid) -> dict:
    return {
        "_id": bid.id,
        "user_id": bid.user_id,
        "auction_id": bid.auction_id,
        "amount": bid.amount,
        "timestamp": math.floor(bid.timestamp.timestamp()),
    }


def _from_document(doc: dict) -> Bid:
    return Bid(
        id=doc.get("_id", ""),
        user_id=doc.get("user_id", ""),
        auction_id=doc.get("auction_id", ""),
        amount=doc.get("amount", 0.0),
        timestamp=datetime.fromtimestamp(doc.get("timestamp", 0), timezone.utc),
    )


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.astimezone()


class BidRepository:
    """Stores bids, refusing those placed on closed or expired auctions."""

    def __init__(self, database, auction_repository, auction_interval: timedelta | None = None) -> None:
        self.collection = database["bids"]
        self.auction_repository = auction_repository
        self.auction_interval = (
            config.auction_interval(DEFAULT_AUCTION_INTERVAL)
            if auction_interval is None
            else auction_interval
        )
        self._status_cache: dict[str, AuctionStatus] = {}
        self._end_time_cache: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def create_bid(self, bids: list[Bid]) -> None:
        """Store each bid whose auction is still open; others are dropped."""
        if not bids:
            return
        with ThreadPoolExecutor(max_workers=min(len(bids), _MAX_WORKERS)) as executor:
            list(executor.map(self._store_bid, bids))

    def _insert(self, doc: dict) -> None:
        try:
            self.collection.insert_one(doc)
        except PyMongoError as exc:
            logger.error("Error trying to insert bid", exc)

    def _store_bid(self, bid: Bid) -> None:
        with self._lock:
            status = self._status_cache.get(bid.auction_id)
            end_time = self._end_time_cache.get(bid.auction_id)
        doc = _to_document(bid)

        if status is not None and end_time is not None:
            if status == AuctionStatus.COMPLETED or datetime.now(timezone.utc) > end_time:
                return
            self._insert(doc)
            return

        try:
            auction = self.auction_repository.find_auction_by_id(bid.auction_id)
        except InternalError as exc:
            logger.error("Error trying to find auction by id", exc)
            return
        if auction.status == AuctionStatus.COMPLETED:
            return

        with self._lock:
            self._status_cache[bid.auction_id] = auction.status
            self._end_time_cache[bid.auction_id] = _aware(auction.timestamp) + self.auction_interval
        self._insert(doc)

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]:
        """Return every bid placed on an auction."""
        message = f"Error trying to find bids by auctionId {auction_id}"
        try:
            docs = list(self.collection.find({"auction_id": auction_id}))
        except PyMongoError as exc:
            logger.error(message, exc)
            raise InternalServerError(message) from exc
        return [_from_document(doc) for doc in docs]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid:
        """Return the bid with the highest amount on an auction."""
        message = "Error trying to find the auction winner"
        try:
            doc = self.collection.find_one({"auction_id": auction_id}, sort=[("amount", -1)])
        except PyMongoError as exc:
            logger.error(message, exc)
            raise InternalServerError(message) from exc
        if doc is None:
            logger.error(message, "no documents in result")
            raise InternalServerError(message)
        return _from_document(doc)