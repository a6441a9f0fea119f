"""Binding and validation of JSON request bodies."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from .auction_usecase import AuctionInput
from .bid_usecase import BidInput
from .errors import Cause, RestError, rest_bad_request, rest_not_found

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_AUCTION_FIELDS: dict[str, type] = {
    "product_name": str,
    "category": str,
    "description": str,
    "condition": int,
}
_BID_FIELDS: dict[str, type] = {
    "user_id": str,
    "auction_id": str,
    "amount": float,
}
_CONDITION_CHOICES = (0, 1, 2)


@dataclass(frozen=True)
class _RealLiteral:
    """A JSON number written with a fraction or an exponent."""

    text: str


class _JsonObject(tuple):
    """The key/value pairs of a JSON object, in document order."""


class _TypeMismatch(Exception):
    """A JSON value cannot be stored in the field it is meant for."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal {name}")


def _parse(payload: str | bytes | bytearray | None) -> Any:
    if payload is None:
        raise ValueError("missing request body")
    if isinstance(payload, (bytes, bytearray)):
        payload = bytes(payload).decode("utf-8", errors="replace")
    return json.loads(
        payload,
        parse_float=_RealLiteral,
        parse_constant=_reject_constant,
        object_pairs_hook=_JsonObject,
    )


def _convert(value: Any, kind: type) -> Any:
    if kind is str:
        if isinstance(value, str):
            return value
    elif kind is int:
        if (
            isinstance(value, int)
            and not isinstance(value, bool)
            and _INT64_MIN <= value <= _INT64_MAX
        ):
            return value
    elif kind is float:
        if isinstance(value, bool):
            pass
        elif isinstance(value, int):
            try:
                return float(value)
            except OverflowError:
                pass
        elif isinstance(value, _RealLiteral):
            number = float(value.text)
            if math.isfinite(number):
                return number
    raise _TypeMismatch


def _match(key: str, fields: dict[str, type]) -> str | None:
    if key in fields:
        return key
    folded = key.lower()
    return next((name for name in fields if name.lower() == folded), None)


def _bind(document: Any, fields: dict[str, type]) -> dict[str, Any]:
    values = {name: kind() for name, kind in fields.items()}
    if document is None:
        return values
    if not isinstance(document, _JsonObject):
        raise _TypeMismatch
    mismatch = False
    for key, value in document:
        name = _match(key, fields)
        if name is None or value is None:
            continue
        try:
            values[name] = _convert(value, fields[name])
        except _TypeMismatch:
            mismatch = True
    if mismatch:
        raise _TypeMismatch
    return values


def _load(payload: str | bytes | bytearray | None, fields: dict[str, type]) -> dict[str, Any]:
    try:
        document = _parse(payload)
    except ValueError as exc:
        raise rest_bad_request("Error trying to convert fields") from exc
    try:
        return _bind(document, fields)
    except _TypeMismatch:
        raise rest_not_found("Invalid type error") from None


def _plural(count: int) -> str:
    return f"{count} character" if count == 1 else f"{count} characters"


def _check_text(field: str, value: str, minimum: int, maximum: int | None = None) -> Cause | None:
    if not value:
        return Cause(field, f"{field} is a required field")
    if len(value) < minimum:
        return Cause(field, f"{field} must be at least {_plural(minimum)} in length")
    if maximum is not None and len(value) > maximum:
        return Cause(field, f"{field} must be a maximum of {_plural(maximum)} in length")
    return None


def validate_auction_input(payload: str | bytes | bytearray | None) -> AuctionInput:
    """Bind a JSON body to an AuctionInput, raising RestError when it is unacceptable."""
    values = _load(payload, _AUCTION_FIELDS)
    causes = [
        cause
        for cause in (
            _check_text("ProductName", values["product_name"], 1),
            _check_text("Category", values["category"], 2),
            _check_text("Description", values["description"], 10, 200),
        )
        if cause is not None
    ]
    if values["condition"] not in _CONDITION_CHOICES:
        options = " ".join(str(choice) for choice in _CONDITION_CHOICES)
        causes.append(Cause("Condition", f"Condition must be one of [{options}]"))
    if causes:
        raise rest_bad_request("Invalid field values", *causes)
    return AuctionInput(
        product_name=values["product_name"],
        category=values["category"],
        description=values["description"],
        condition=values["condition"],
    )


def validate_bid_input(payload: str | bytes | bytearray | None) -> BidInput:
    """Bind a JSON body to a BidInput, raising RestError when it cannot be read."""
    values = _load(payload, _BID_FIELDS)
    return BidInput(
        user_id=values["user_id"],
        auction_id=values["auction_id"],
        amount=values["amount"],
    )


__all__ = ["RestError", "validate_auction_input", "validate_bid_input"]