"""Request handlers for auctions, bids and users.

Each handler returns ``(status, body)`` where ``body`` is JSON-ready data.
"""

from __future__ import annotations

import re
from http import HTTPStatus
from typing import Any

from .entities import is_valid_uuid
from .errors import Cause, InternalError, RestError, convert_error, rest_bad_request
from .validation import validate_auction_input, validate_bid_input

_INTEGER = re.compile(r"[+-]?\d+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

Reply = tuple[int, Any]


def _error_reply(err: RestError) -> Reply:
    return err.code, err.to_dict()


def _invalid_uuid(field: str) -> Reply:
    return _error_reply(rest_bad_request("Invalid fields", Cause(field, "Invalid UUID value")))


def _parse_status(text: str | None) -> int | None:
    if text is None or _INTEGER.fullmatch(text) is None:
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


class AuctionController:
    """Handlers for the auction endpoints."""

    def __init__(self, auction_use_case) -> None:
        self.auction_use_case = auction_use_case

    def create_auction(self, payload) -> Reply:
        try:
            auction_input = validate_auction_input(payload)
        except RestError as exc:
            return _error_reply(exc)
        try:
            self.auction_use_case.create_auction(auction_input)
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.CREATED), None

    def find_auction_by_id(self, auction_id: str) -> Reply:
        if not is_valid_uuid(auction_id):
            return _invalid_uuid("auctionId")
        try:
            auction = self.auction_use_case.find_auction_by_id(auction_id)
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.OK), auction.to_dict()

    def find_auctions(self, status: str | None, category: str | None, product_name: str | None) -> Reply:
        status_number = _parse_status(status)
        if status_number is None:
            return _error_reply(
                rest_bad_request("Error trying to validate auction status param")
            )
        try:
            auctions = self.auction_use_case.find_auctions(
                status_number, category or "", product_name or ""
            )
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.OK), [auction.to_dict() for auction in auctions] or None

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Reply:
        if not is_valid_uuid(auction_id):
            return _invalid_uuid("auctionId")
        try:
            winning = self.auction_use_case.find_winning_bid_by_auction_id(auction_id)
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.OK), winning.to_dict()


class BidController:
    """Handlers for the bid endpoints."""

    def __init__(self, bid_use_case) -> None:
        self.bid_use_case = bid_use_case

    def create_bid(self, payload) -> Reply:
        try:
            bid_input = validate_bid_input(payload)
        except RestError as exc:
            return _error_reply(exc)
        try:
            self.bid_use_case.create_bid(bid_input)
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.CREATED), None

    def find_bid_by_auction_id(self, auction_id: str) -> Reply:
        if not is_valid_uuid(auction_id):
            return _invalid_uuid("auctionId")
        try:
            bids = self.bid_use_case.find_bid_by_auction_id(auction_id)
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.OK), [bid.to_dict() for bid in bids] or None


class UserController:
    """Handlers for the user endpoints."""

    def __init__(self, user_use_case) -> None:
        self.user_use_case = user_use_case

    def find_user_by_id(self, user_id: str) -> Reply:
        if not is_valid_uuid(user_id):
            return _invalid_uuid("userId")
        try:
            user = self.user_use_case.find_user_by_id(user_id)
        except InternalError as exc:
            return _error_reply(convert_error(exc))
        return int(HTTPStatus.OK), user.to_dict()