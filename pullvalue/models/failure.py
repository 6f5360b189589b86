"""
Response envelope and failure classification.

Every API response is wrapped in an ApiResponse and classified as one of:
- Success: cards were resolved (possibly an empty list)
- KnownFailure: the system knows why it failed (bad input, upstream down)
- UnknownFailure: anything else

Intermediate fallbacks (missing cache file, missing set config, empty
search result) are NOT failures and never reach this module. Only a total
inability to produce data for a query surfaces here.

AUTHORITY BOUNDARY:
All user-visible responses pass through `finalize_response()`, a pure
structure check.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    EXTERNAL_API_ERROR = "external_api_error"
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Universal response envelope for all card endpoints."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to a checked ApiResponse."""
        response: ApiResponse[Any] = ApiResponse(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=self.kind,
                message=self.message,
                detail=self.detail,
                suggestion=self.suggestion,
            ),
        )
        return finalize_response(response)


class CardFetchError(KnownError):
    """
    Every card source for a query was exhausted.

    Raised when the static cache missed and the live query failed after
    its retries. The user sees a generic retry suggestion.
    """

    def __init__(self, set_code: str, detail: str | None = None):
        self.set_code = set_code
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="Failed to load cards. Please try again.",
            detail=detail,
            suggestion="Wait a moment and retry; the card database may be rate limiting.",
            status_code=502,
        )


class UnknownSetError(KnownError):
    """The requested set code is not in the set list."""

    def __init__(self, set_code: str):
        self.set_code = set_code
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Unknown set: {set_code}",
            suggestion="Pick a set from /sets.",
            status_code=404,
        )


# =============================================================================
# FAILURE AUTHORITY BOUNDARY
# =============================================================================

UNKNOWN_FAILURE_MESSAGE = "Something went wrong loading cards. Please try again."
UNKNOWN_FAILURE_SUGGESTION = "If this persists, please report the issue."


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Check a response's structure before it leaves the service.

    Success carries no failure details; every other outcome must carry them.

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    elif response.failure is None:
        raise ValueError(f"{response.outcome.value} response must have failure details")

    return response


def create_unknown_failure(exception: Exception) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed; only the exception type is exposed as detail.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=UNKNOWN_FAILURE_MESSAGE,
            detail=type(exception).__name__,
            suggestion=UNKNOWN_FAILURE_SUGGESTION,
        ),
    )

    return finalize_response(response)


def create_success(data: T) -> ApiResponse[T]:
    """Create a checked success response."""
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    return finalize_response(response)
