"""
Feed fetching for feedcheck.

Provides:
- Async HTTP fetching with a fallback User-Agent retry on 403
- Classification of fetch failures into the error taxonomy
- Transient/permanent traits of error categories
"""

from .errors import (
    FeedFetchError,
    TRANSIENT_CATEGORIES,
    is_transient,
    is_transient_result,
)

from .error_classifier import (
    ClassifiedError,
    ErrorRule,
    ERROR_RULES,
    classify_exception,
    match_rule,
)

from .http_fetcher import (
    FetchResponse,
    HttpFetcher,
)
