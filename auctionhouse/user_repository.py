"""Lookup of users in the ``users`` collection."""

from __future__ import annotations

from pymongo.errors import PyMongoError

from . import logger
from .entities import User
from .errors import InternalServerError, NotFoundError


class UserRepository:
    """Reads users from the database."""

    def __init__(self, database) -> None:
        self.collection = database["users"]

    def find_user_by_id(self, user_id: str) -> User:
        """Return the user with the given id."""
        try:
            doc = self.collection.find_one({"_id": user_id})
        except PyMongoError as exc:
            logger.error("Error trying to find user by userId", exc)
            raise InternalServerError("Error trying to find user by userId") from exc
        if doc is None:
            message = f"User not found with this id = {user_id}"
            logger.error(message, "no documents in result")
            raise NotFoundError(message)
        return User(id=doc.get("_id", ""), name=doc.get("name", ""))