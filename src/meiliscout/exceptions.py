"""Driver exceptions."""

from __future__ import annotations

from typing import Any


class MeiliScoutError(Exception):
    """Base exception for meiliscout errors."""


class ConnectionError(MeiliScoutError):
    """Raised when the MeiliSearch instance cannot be reached."""


class ApiError(MeiliScoutError):
    """Raised when MeiliSearch rejects a request with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the server.
        code: MeiliSearch error code (e.g. ``index_not_found``), if any.
        link: Documentation link supplied by the server, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        code: str | None = None,
        link: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.link = link

    @classmethod
    def from_payload(cls, status_code: int, payload: Any) -> ApiError:
        """Build an error from a MeiliSearch error body."""
        if isinstance(payload, dict):
            return cls(
                str(payload.get("message") or f"MeiliSearch returned HTTP {status_code}"),
                status_code=status_code,
                code=payload.get("code"),
                link=payload.get("link"),
            )
        return cls(f"MeiliSearch returned HTTP {status_code}", status_code=status_code)


class TaskTimeoutError(MeiliScoutError):
    """Raised when an enqueued MeiliSearch task does not finish in time."""


class InvalidResultError(MeiliScoutError):
    """Raised when a raw search result lacks the fields the mapper needs."""


class ConfigurationError(MeiliScoutError):
    """Raised when driver configuration is invalid."""
