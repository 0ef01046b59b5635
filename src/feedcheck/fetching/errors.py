"""
Fetch error types and category traits.
"""
from typing import Optional, Union

from ..shared.exceptions import FeedCheckError
from ..shared.schemas import ErrorCategory, ValidationResult


class FeedFetchError(FeedCheckError):
    """Raised when a feed could not be retrieved; carries its failure category."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        status_code: Optional[int] = None,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.category = ErrorCategory(category)
        self.status_code = status_code
        self.original_error = original_error

    def __repr__(self):
        return f"FeedFetchError({str(self)!r}, category={self.category.value}, status_code={self.status_code})"


# Failures that are expected to clear up on a later attempt
TRANSIENT_CATEGORIES = frozenset({
    ErrorCategory.TIMEOUT,
    ErrorCategory.NETWORK_ERROR,
    ErrorCategory.SSL_ERROR,
    ErrorCategory.UNKNOWN_ERROR,
})

TRANSIENT_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


def is_transient(category: Union[ErrorCategory, str], status_code: Optional[int] = None) -> bool:
    """
    Tell whether a failure is worth retrying later.

    HTTP status failures are transient only for server-side and throttling
    statuses; a 404 or 410 will not fix itself.
    """
    category = ErrorCategory(category)
    if category == ErrorCategory.HTTP_STATUS:
        return status_code is not None and (status_code in TRANSIENT_STATUS_CODES or status_code >= 500)
    return category in TRANSIENT_CATEGORIES


def is_transient_result(result: ValidationResult) -> bool:
    """Transient check for a failed ValidationResult; valid results are never transient."""
    if result.is_valid or result.error_category is None:
        return False
    return is_transient(result.error_category, result.status_code)
