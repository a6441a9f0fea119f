"""Domain errors and their HTTP-facing counterparts."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus


class InternalError(Exception):
    """An error raised by the domain and persistence layers."""

    err = "internal_server_error"

    def __init__(self, message: str, err: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if err is not None:
            self.err = err

    def __str__(self) -> str:
        return self.message


class NotFoundError(InternalError):
    """The requested resource does not exist."""

    err = "not_found"


class InternalServerError(InternalError):
    """Something failed inside the service."""

    err = "internal_server_error"


class BadRequestError(InternalError):
    """The caller supplied invalid data."""

    err = "bad_request"


@dataclass(frozen=True)
class Cause:
    """One field-level reason behind a bad request."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class RestError(Exception):
    """An error ready to be sent to an HTTP client as JSON."""

    def __init__(
        self,
        message: str,
        err: str,
        code: int,
        causes: list[Cause] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.err = err
        self.code = code
        self.causes = causes

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        """Return the JSON body for this error."""
        causes = None if self.causes is None else [c.to_dict() for c in self.causes]
        return {
            "message": self.message,
            "err": self.err,
            "code": self.code,
            "causes": causes,
        }


def rest_bad_request(message: str, *args: Cause) -> RestError:
    """Build a 400 error, optionally listing the offending fields."""
    return RestError(message, "bad_request", int(HTTPStatus.BAD_REQUEST), list(args) or None)


def rest_internal_server(message: str) -> RestError:
    """Build a 500 error."""
    return RestError(message, "internal_server", int(HTTPStatus.INTERNAL_SERVER_ERROR))


def rest_not_found(message: str) -> RestError:
    """Build a 404 error."""
    return RestError(message, "not_found", int(HTTPStatus.NOT_FOUND))


def convert_error(internal_error: InternalError) -> RestError:
    """Map a domain error onto the matching HTTP error."""
    if internal_error.err == "bad_request":
        return rest_bad_request(str(internal_error))
    if internal_error.err == "not_found":
        return rest_not_found(str(internal_error))
    return rest_internal_server(str(internal_error))