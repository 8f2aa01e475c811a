"""
Custom exceptions for creator proposal aggregation.

Provides a small hierarchy of exceptions with HTTP-like error codes so the
HTTP layer and the query cache can classify failures consistently.
"""
from typing import Any, List, Optional


class CreatorProposalsError(Exception):
    """Base exception for all creator proposal errors."""

    def __init__(
        self,
        message: str,
        code: int = 500,
        retryable: bool = True,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        result = {
            "error_code": self.code,
            "error_message": self.message,
            "error_type": type(self).__name__,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            result["retry_after"] = self.retry_after
        return result


class ClientUnavailableError(CreatorProposalsError):
    """503 - No plugin client could be resolved, or it is gone at call time."""

    def __init__(self, message: str = "Plugin client is not available"):
        super().__init__(message, code=503, retryable=False)


class QueryExecutionError(CreatorProposalsError):
    """502 - The indexer transport failed or returned a malformed response."""

    def __init__(
        self,
        message: str = "Indexer query failed",
        status_code: Optional[int] = None,
        errors: Optional[List[Any]] = None,
    ):
        self.status_code = status_code
        self.errors = errors
        super().__init__(message, code=502, retryable=True)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.status_code is not None:
            result["upstream_status"] = self.status_code
        if self.errors:
            result["upstream_errors"] = self.errors
        return result


class InvalidQueryError(CreatorProposalsError):
    """400 - The caller sent parameters that cannot be turned into a query."""

    def __init__(self, message: str = "Invalid creator proposals query"):
        super().__init__(message, code=400, retryable=False)


def classify_exception(error: Exception) -> CreatorProposalsError:
    """Convert an arbitrary exception into a CreatorProposalsError."""
    if isinstance(error, CreatorProposalsError):
        return error
    return CreatorProposalsError(f"Unexpected error: {error}", code=500)
