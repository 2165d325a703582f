"""Custom exception classes for GitHub Hunter.

All exceptions follow the GHH error format:
{
    "error": {
        "code": "GHH_ERROR_CODE",
        "message": "Human-readable message",
        "details": {}  # optional
    }
}
"""

from __future__ import annotations

from typing import Any

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class GHHBaseError(Exception):
    """Base exception for GitHub Hunter."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class GitHubAPIError(GHHBaseError):
    """Network, status or decode failure talking to GitHub.

    An empty message falls back to the generic one so callers always
    have something to show.
    """

    def __init__(self, message: str = "", status_code: int = 502) -> None:
        super().__init__(
            code="GITHUB_API_ERROR",
            message=message or GENERIC_ERROR_MESSAGE,
            status_code=status_code,
        )


class GitHubStatusError(GitHubAPIError):
    """GitHub answered with a non-success status."""

    def __init__(self, upstream_status: int) -> None:
        super().__init__(f"API Error: {upstream_status}")
        self.upstream_status = upstream_status
        self.details = {"upstream_status": upstream_status}


class GitHubUserNotFoundError(GHHBaseError):
    """GitHub user not found."""

    def __init__(self) -> None:
        super().__init__(
            code="GITHUB_USER_NOT_FOUND",
            message="User not found",
            status_code=404,
        )


class StaleSearchError(GHHBaseError):
    """A newer search superseded this one before it completed."""

    def __init__(self, generation: int, current: int) -> None:
        super().__init__(
            code="STALE_SEARCH",
            message="Search was superseded by a newer one",
            status_code=409,
            details={"generation": generation, "current_generation": current},
        )


class BattleNotReadyError(GHHBaseError):
    """Fewer than two participants in the battle."""

    def __init__(self, participants: int) -> None:
        super().__init__(
            code="BATTLE_NOT_READY",
            message="Add at least 2 developers to start a battle",
            status_code=409,
            details={"participants": participants},
        )


class UnknownMetricError(GHHBaseError):
    """Requested battle metric does not exist."""

    def __init__(self, metric: str, available: list[str]) -> None:
        super().__init__(
            code="UNKNOWN_METRIC",
            message=f"Unknown battle metric: {metric}",
            status_code=422,
            details={"available": available},
        )


class SessionRequiredError(GHHBaseError):
    """Client-scoped endpoint called without a session identifier."""

    def __init__(self) -> None:
        super().__init__(
            code="SESSION_REQUIRED",
            message="X-Session-ID header is required for this endpoint",
            status_code=400,
        )


class ValidationError(GHHBaseError):
    """Input validation error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )
