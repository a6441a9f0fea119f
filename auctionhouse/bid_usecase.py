"""Bid use cases: batched bid creation and bid lookups."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from . import config, logger
from .entities import Bid, create_bid
from .errors import InternalError

_STOP = object()


class BidRepository(Protocol):
    def create_bid(self, bids: list[Bid]) -> None: ...

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]: ...

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid: ...


@dataclass(frozen=True)
class BidInput:
    """A bid as submitted by a client."""

    user_id: str
    auction_id: str
    amount: float


@dataclass(frozen=True)
class BidOutput:
    """A stored bid as returned to a client."""

    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime

    @classmethod
    def from_entity(cls, bid: Bid) -> BidOutput:
        return cls(
            id=bid.id,
            user_id=bid.user_id,
            auction_id=bid.auction_id,
            amount=bid.amount,
            timestamp=bid.timestamp,
        )

    def to_dict(self) -> dict:
        """Return the JSON body for this bid."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "auction_id": self.auction_id,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
        }


class BidUseCase:
    """Accepts bids and writes them to the repository in batches.

    A batch is written once it holds ``max_batch_size`` bids, or when
    ``batch_insert_interval`` passes without the batch filling up.
    """

    def __init__(
        self,
        bid_repository: BidRepository,
        max_batch_size: int | None = None,
        batch_insert_interval: timedelta | None = None,
    ) -> None:
        self.bid_repository = bid_repository
        self.max_batch_size = (
            config.max_batch_size() if max_batch_size is None else max_batch_size
        )
        self.batch_insert_interval = (
            config.batch_insert_interval()
            if batch_insert_interval is None
            else batch_insert_interval
        )
        self._queue: queue.Queue = queue.Queue(maxsize=max(self.max_batch_size, 0))
        self._batch: list[Bid] = []
        self._closed = False
        self._lock = threading.Lock()
        self._worker = threading.Thread(target=self._run, name="bid-batcher", daemon=True)
        self._worker.start()

    def __enter__(self) -> BidUseCase:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _flush(self) -> None:
        if self._batch:
            try:
                self.bid_repository.create_bid(list(self._batch))
            except Exception as exc:  # keep the batching worker alive
                logger.error("error trying to process bid batch list", exc)
        self._batch = []

    def _run(self) -> None:
        interval = max(self.batch_insert_interval.total_seconds(), 0.0)
        deadline = time.monotonic() + interval
        while True:
            timeout = max(deadline - time.monotonic(), 0.0)
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                self._flush()
                deadline = time.monotonic() + interval
                continue
            if item is _STOP:
                self._flush()
                return
            self._batch.append(item)
            if len(self._batch) >= self.max_batch_size:
                self._flush()
                deadline = time.monotonic() + interval

    def create_bid(self, bid_input: BidInput) -> None:
        """Validate a bid and queue it for the next batch write."""
        if self._closed:
            raise RuntimeError("bid use case is closed")
        bid = create_bid(bid_input.user_id, bid_input.auction_id, bid_input.amount)
        self._queue.put(bid)

    def find_bid_by_auction_id(self, auction_id: str) -> list[BidOutput]:
        """Return every bid placed on an auction."""
        return [
            BidOutput.from_entity(bid)
            for bid in self.bid_repository.find_bid_by_auction_id(auction_id)
        ]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> BidOutput:
        """Return the highest bid placed on an auction."""
        bid = self.bid_repository.find_winning_bid_by_auction_id(auction_id)
        return BidOutput.from_entity(bid)

    def close(self) -> None:
        """Write any pending bids and stop the batching worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_STOP)
        self._worker.join()


__all__ = ["BidInput", "BidOutput", "BidUseCase", "InternalError"]