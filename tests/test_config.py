from datetime import timedelta

import pytest

from auctionhouse.config import (
    auction_interval,
    batch_insert_interval,
    max_batch_size,
    parse_duration,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3m", timedelta(minutes=3)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("20s", timedelta(seconds=20)),
        ("250ms", timedelta(milliseconds=250)),
        ("0", timedelta(0)),
        ("-2s", -timedelta(seconds=2)),
        ("+5m", timedelta(minutes=5)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


def test_parse_duration_fraction():
    assert parse_duration("1.5h") == parse_duration("1h30m")


@pytest.mark.parametrize("text", ["", "abc", "5", "1x", "m", "1h 2m", "-"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_batch_insert_interval_default(monkeypatch):
    monkeypatch.delenv("BATCH_INSERT_INTERVAL", raising=False)
    assert batch_insert_interval() == timedelta(minutes=3)


def test_batch_insert_interval_from_env(monkeypatch):
    monkeypatch.setenv("BATCH_INSERT_INTERVAL", "20s")
    assert batch_insert_interval() == timedelta(seconds=20)


def test_batch_insert_interval_invalid(monkeypatch):
    monkeypatch.setenv("BATCH_INSERT_INTERVAL", "soon")
    assert batch_insert_interval() == timedelta(minutes=3)


@pytest.mark.parametrize("value, expected", [("10", 10), ("-1", -1), ("x", 5), (" 4", 5), ("", 5)])
def test_max_batch_size(monkeypatch, value, expected):
    monkeypatch.setenv("MAX_BATCH_SIZE", value)
    assert max_batch_size() == expected


def test_max_batch_size_unset(monkeypatch):
    monkeypatch.delenv("MAX_BATCH_SIZE", raising=False)
    assert max_batch_size() == 5


def test_auction_interval(monkeypatch):
    fallback = timedelta(minutes=5)
    monkeypatch.delenv("AUCTION_INTERVAL", raising=False)
    assert auction_interval(fallback) == fallback
    monkeypatch.setenv("AUCTION_INTERVAL", "20s")
    assert auction_interval(fallback) == timedelta(seconds=20)
    monkeypatch.setenv("AUCTION_INTERVAL", "forever")
    assert auction_interval(fallback) == fallback