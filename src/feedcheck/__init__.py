"""
feedcheck - feed URL validation with error classification.

Fetches a URL, classifies network and HTTP failures into a fixed taxonomy,
parses RSS 2.0 / Atom and checks the document is a usable feed.
"""
from typing import Iterable

from .fetching.errors import FeedFetchError, is_transient, is_transient_result
from .fetching.http_fetcher import FetchResponse, HttpFetcher
from .parsing.feed_parser import (
    FeedParsingError,
    FeedXmlSyntaxError,
    UnsupportedFeedFormatError,
    XmlFeedParser,
)
from .shared.exceptions import ConfigurationError, FeedCheckError
from .shared.schemas import (
    ErrorCategory,
    FeedInfo,
    FeedItem,
    FeedValidationSummary,
    ValidationResult,
)
from .validation.orchestrator import FeedValidationOrchestrator
from .validation.special_handling import SpecialHandlingDetector
from .validation.structure_validator import FeedStructureValidator

__version__ = "1.0.0"


async def validate_feed(url: str) -> ValidationResult:
    """Validate one feed URL with settings-driven defaults."""
    return await FeedValidationOrchestrator().validate_feed(url)


async def validate_feeds(urls: Iterable[str]) -> FeedValidationSummary:
    """Validate many feed URLs concurrently with settings-driven defaults."""
    return await FeedValidationOrchestrator().validate_feeds(urls)


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "FeedCheckError",
    "FeedFetchError",
    "FeedInfo",
    "FeedItem",
    "FeedParsingError",
    "FeedStructureValidator",
    "FeedValidationOrchestrator",
    "FeedValidationSummary",
    "FeedXmlSyntaxError",
    "FetchResponse",
    "HttpFetcher",
    "SpecialHandlingDetector",
    "UnsupportedFeedFormatError",
    "ValidationResult",
    "XmlFeedParser",
    "is_transient",
    "is_transient_result",
    "validate_feed",
    "validate_feeds",
]
