"""Persistence of auctions in the ``auctions`` collection."""

from __future__ import annotations

import math
import threading
from datetime import datetime, timedelta, timezone

from pymongo.errors import PyMongoError

from . import config, logger
from .entities import Auction, AuctionStatus
from .errors import InternalServerError

DEFAULT_AUCTION_INTERVAL = timedelta(minutes=1)


def _unix(moment: datetime) -> int:
    return math.floor(moment.timestamp())


def _status(value) -> AuctionStatus | int:
    try:
        return AuctionStatus(value)
    except ValueError:
        return value


def _to_document(auction: Auction) -> dict:
    return {
        "_id": auction.id,
        "product_name": auction.product_name,
        "category": auction.category,
        "description": auction.description,
        "condition": int(auction.condition),
        "status": int(auction.status),
        "timestamp": _unix(auction.timestamp),
    }


def _from_document(doc: dict) -> Auction:
    return Auction(
        id=doc.get("_id", ""),
        product_name=doc.get("product_name", ""),
        category=doc.get("category", ""),
        description=doc.get("description", ""),
        condition=doc.get("condition", 0),
        status=_status(doc.get("status", 0)),
        timestamp=datetime.fromtimestamp(doc.get("timestamp", 0), timezone.utc),
    )


class AuctionRepository:
    """Stores auctions and closes each one once its interval has passed."""

    def __init__(self, database, auction_interval: timedelta | None = None) -> None:
        self.collection = database["auctions"]
        self.auction_interval = (
            config.auction_interval(DEFAULT_AUCTION_INTERVAL)
            if auction_interval is None
            else auction_interval
        )
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def create_auction(self, auction: Auction) -> None:
        """Insert an auction and schedule its completion."""
        try:
            self.collection.insert_one(_to_document(auction))
        except PyMongoError as exc:
            logger.error("Error trying to insert auction", exc)
            raise InternalServerError("Error trying to insert auction") from exc

        delay = max(self.auction_interval.total_seconds(), 0.0)
        timer = threading.Timer(delay, lambda: None)
        timer.function = self._complete
        timer.args = (auction, timer)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def _complete(self, auction: Auction, timer: threading.Timer) -> None:
        with self._lock:
            self._timers.discard(timer)
        auction.status = AuctionStatus.COMPLETED
        try:
            self.collection.update_one(
                {"_id": auction.id}, {"$set": {"status": int(auction.status)}}
            )
        except PyMongoError as exc:
            logger.error("Error trying to update auction status", exc)

    def find_auction_by_id(self, auction_id: str) -> Auction:
        """Return the auction with the given id."""
        try:
            doc = self.collection.find_one({"_id": auction_id})
        except PyMongoError as exc:
            logger.error(f"Error trying to find auction by id = {auction_id}", exc)
            raise InternalServerError("Error trying to find auction by id") from exc
        if doc is None:
            logger.error(f"Error trying to find auction by id = {auction_id}", "no documents in result")
            raise InternalServerError("Error trying to find auction by id")
        return _from_document(doc)

    def find_auctions(self, status: int, category: str, product_name: str) -> list[Auction]:
        """Return auctions matching the non-empty filters."""
        query: dict = {}
        if status != 0:
            query["status"] = int(status)
        if category:
            query["category"] = category
        if product_name:
            query["productName"] = {"$regex": product_name, "$options": "i"}

        try:
            cursor = self.collection.find(query)
        except PyMongoError as exc:
            logger.error("Error finding auctions", exc)
            raise InternalServerError("Error finding auctions") from exc
        try:
            docs = list(cursor)
        except PyMongoError as exc:
            logger.error("Error decoding auctions", exc)
            raise InternalServerError("Error decoding auctions") from exc
        finally:
            close = getattr(cursor, "close", None)
            if close is not None:
                close()
        return [_from_document(doc) for doc in docs]

    def close(self) -> None:
        """Cancel every pending auction completion."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()