"""Exception types shared across the package."""

from __future__ import annotations

from typing import Any


class TampayangError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(TampayangError):
    """A request field failed validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(TampayangError):
    """The requested record does not exist."""


class ElasticsearchError(TampayangError):
    """The search server answered with a non-success status."""

    def __init__(self, status_code: int, body: Any) -> None:
        super().__init__(f"search server returned status {status_code}: {body!r}")
        self.status_code = status_code
        self.body = body


class GorestError(TampayangError):
    """The user API rejected a request; ``data`` holds the error entries it returned."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        super().__init__(f"user API request failed: {data!r}")
        self.data = data