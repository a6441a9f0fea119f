"""Settings read from the environment."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from decimal import Decimal

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"
_UNIT = r"(?:ns|us|µs|μs|ms|s|m|h)"
_DURATION = re.compile(rf"([+-]?)((?:{_NUMBER}{_UNIT})+)")
_COMPONENT = re.compile(rf"({_NUMBER})({_UNIT})")
_INTEGER = re.compile(r"[+-]?\d+")
_MAX_NANOS = 2**63 - 1

DEFAULT_BATCH_INSERT_INTERVAL = timedelta(minutes=3)
DEFAULT_MAX_BATCH_SIZE = 5


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"1h30m"`` or ``"250ms"``."""
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    match = _DURATION.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid duration {text!r}")
    sign, body = match.groups()
    nanos = 0
    for number, unit in _COMPONENT.findall(body):
        nanos += int(Decimal(number) * _UNIT_NANOS[unit])
    if nanos > _MAX_NANOS:
        raise ValueError(f"invalid duration {text!r}")
    result = timedelta(microseconds=nanos // 1000)
    return -result if sign == "-" else result


def _duration_from_env(name: str, default: timedelta) -> timedelta:
    try:
        return parse_duration(os.environ.get(name, ""))
    except ValueError:
        return default


def batch_insert_interval() -> timedelta:
    """How long bids may wait before being written as a batch."""
    return _duration_from_env("BATCH_INSERT_INTERVAL", DEFAULT_BATCH_INSERT_INTERVAL)


def max_batch_size() -> int:
    """How many bids are collected before a batch is written."""
    value = os.environ.get("MAX_BATCH_SIZE", "")
    if _INTEGER.fullmatch(value) is None:
        return DEFAULT_MAX_BATCH_SIZE
    return int(value)


def auction_interval(default: timedelta) -> timedelta:
    """How long an auction stays open, or ``default`` when unset or invalid."""
    return _duration_from_env("AUCTION_INTERVAL", default)