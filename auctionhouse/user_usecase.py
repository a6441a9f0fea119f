"""User use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .entities import User


class UserRepository(Protocol):
    def find_user_by_id(self, user_id: str) -> User: ...


@dataclass(frozen=True)
class UserOutput:
    """A user as returned to a client."""

    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON body for this user."""
        return {"id": self.id, "name": self.name}


class UserUseCase:
    """Operations on users, backed by a user repository."""

    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repository = user_repository

    def find_user_by_id(self, user_id: str) -> UserOutput:
        """Return one user."""
        user = self.user_repository.find_user_by_id(user_id)
        return UserOutput(id=user.id, name=user.name)