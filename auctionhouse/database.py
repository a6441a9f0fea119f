"""Connecting to the MongoDB database that backs the service."""

from __future__ import annotations

import os

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from . import logger

MONGODB_URL = "MONGODB_URL"
MONGODB_DB = "MONGODB_DB"
DEFAULT_TIMEOUT_MS = 30_000


def connect(url: str, database_name: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Database:
    """Connect to ``url``, check the server answers, and return the named database."""
    try:
        client: MongoClient = MongoClient(url, serverSelectionTimeoutMS=timeout_ms)
    except PyMongoError as exc:
        logger.error("Error trying to connect to mongodb database", exc)
        raise
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("Error trying to ping mongodb database", exc)
        client.close()
        raise
    return client[database_name]


def connect_from_env() -> Database:
    """Connect using the ``MONGODB_URL`` and ``MONGODB_DB`` environment variables."""
    return connect(os.environ.get(MONGODB_URL, ""), os.environ.get(MONGODB_DB, ""))