"""
Feed Validation Orchestrator
End-to-end validation of feed URLs: fetch, parse, check structure.

The orchestrator is where every failure turns into a ValidationResult.
``validate_feed`` and ``validate_feeds`` never raise; callers treat them as
total functions. Decision order for one URL:

1. Malformed URL -> VALIDATION_ERROR, no request is made
2. Fetch exception -> category from the error classifier
3. Non-2xx response (after the 403 retry) -> HTTP_STATUS
4. Empty body -> EMPTY_RESPONSE
5. Structural problems -> VALIDATION_ERROR
6. No items -> EMPTY_FEED
7. Success, with special handling metadata when a handler applies

Anything unexpected along the way is reported as UNKNOWN_ERROR.
"""
import asyncio
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import httpx
import structlog

from ..fetching.error_classifier import classify_exception
from ..fetching.errors import FeedFetchError
from ..fetching.http_fetcher import HttpFetcher
from ..shared.config import ValidationSettings, get_validation_settings
from ..shared.logging_config import CorrelationContext
from ..shared.schemas import ErrorCategory, FeedValidationSummary, ValidationResult
from .special_handling import SpecialHandlingDetector
from .structure_validator import FeedStructureValidator

logger = structlog.get_logger(__name__)


def is_valid_feed_url(url: str) -> bool:
    """Check that the URL is an absolute http(s) URL with a usable host and port."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
        # Raises ValueError for non-numeric or out-of-range ports
        parsed.port
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    hostname = parsed.hostname
    return bool(hostname) and not any(ch.isspace() for ch in hostname)


class FeedValidationOrchestrator:
    """
    Composes HttpFetcher, FeedStructureValidator and SpecialHandlingDetector.

    The orchestrator keeps no per-URL state, so validating the same content
    twice yields identical results.
    """

    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        structure_validator: Optional[FeedStructureValidator] = None,
        detector: Optional[SpecialHandlingDetector] = None,
        max_concurrency: Optional[int] = None,
        settings: Optional[ValidationSettings] = None,
    ):
        settings = settings or get_validation_settings()
        self.fetcher = fetcher or HttpFetcher()
        self.structure_validator = structure_validator or FeedStructureValidator()
        self.detector = detector or SpecialHandlingDetector()
        self.max_concurrency = max_concurrency if max_concurrency is not None else settings.max_concurrency
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.logger = logger.bind(component="feed_validation_orchestrator")

    async def validate_feed(self, url: str) -> ValidationResult:
        """
        Validate a single feed URL.

        Args:
            url: Feed URL to validate

        Returns:
            ValidationResult describing the outcome; never raises
        """
        try:
            result = await self._validate(url)
        except Exception as e:
            self.logger.error(
                "Unexpected error validating feed",
                url=url,
                error=str(e),
                exc_info=True
            )
            result = ValidationResult.failure(
                str(url), ErrorCategory.UNKNOWN_ERROR, str(e) or type(e).__name__
            )

        self.logger.info(
            "Feed validated",
            url=url,
            is_valid=result.is_valid,
            error_category=result.error_category,
            status_code=result.status_code
        )
        return result

    async def _validate(self, url: str) -> ValidationResult:
        if not is_valid_feed_url(url):
            return ValidationResult.failure(
                "" if url is None else str(url), ErrorCategory.VALIDATION_ERROR, "Invalid URL format"
            )

        try:
            response = await self.fetcher.get(url)
        except httpx.InvalidURL as e:
            self.logger.debug("URL rejected by HTTP client", url=url, error=str(e))
            return ValidationResult.failure(url, ErrorCategory.VALIDATION_ERROR, "Invalid URL format")
        except FeedFetchError as e:
            return ValidationResult.failure(url, e.category, str(e), status_code=e.status_code)
        except Exception as e:
            classified = classify_exception(e)
            return ValidationResult.failure(
                url, classified.category, classified.detail, status_code=classified.status_code
            )

        if not response.ok:
            detail = f"HTTP {response.status_code}: {response.status_text}"
            return ValidationResult.failure(
                url, ErrorCategory.HTTP_STATUS, detail, status_code=response.status_code
            )

        if not response.text or not response.text.strip():
            return ValidationResult.failure(
                url, ErrorCategory.EMPTY_RESPONSE, "Empty response", status_code=response.status_code
            )

        structural = self.structure_validator.validate(response.text, url)
        if not structural.is_valid:
            return structural.model_copy(update={"status_code": response.status_code})

        feed_info = structural.feed_info
        if feed_info is None or not feed_info.items:
            return ValidationResult.failure(
                url,
                ErrorCategory.EMPTY_FEED,
                "Feed contains no items",
                status_code=response.status_code,
                feed_info=feed_info,
            )

        return ValidationResult.success(
            url,
            feed_info,
            status_code=response.status_code,
            special_handler_type=self.detector.detect(response),
        )

    async def validate_feeds(self, urls: Iterable[str]) -> FeedValidationSummary:
        """
        Validate many feed URLs concurrently.

        Results keep the order of ``urls``. When ``max_concurrency`` is set,
        at most that many validations run at once.
        """
        urls = list(urls)
        with CorrelationContext() as context:
            self.logger.info(
                "Validating feed batch",
                feed_count=len(urls),
                max_concurrency=self.max_concurrency,
                batch_id=context.correlation_id_value
            )

            if self.max_concurrency:
                semaphore = asyncio.Semaphore(self.max_concurrency)

                async def bounded(url: str) -> ValidationResult:
                    async with semaphore:
                        return await self.validate_feed(url)

                tasks = [bounded(url) for url in urls]
            else:
                tasks = [self.validate_feed(url) for url in urls]

            results: List[ValidationResult] = list(await asyncio.gather(*tasks))
            summary = FeedValidationSummary.from_results(results)

            self.logger.info(
                "Feed batch validated",
                total_checked=summary.total_checked,
                valid_feeds=summary.valid_feeds,
                invalid_feeds=summary.invalid_feeds,
                errors_by_category=summary.errors_by_category
            )
            return summary
