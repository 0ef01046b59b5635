"""
Feed Health Tracking
In-memory health bookkeeping for validated feeds.

Validation itself is stateless. Consumers that validate the same feeds
repeatedly feed each ValidationResult into a FeedHealthTracker, which keeps
failure streaks and gives up on feeds that keep failing for reasons that
will not fix themselves (DNS errors, 404s, malformed documents).
"""
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from ..fetching.errors import is_transient_result
from ..shared.config import get_validation_settings
from ..shared.schemas import ValidationResult

logger = structlog.get_logger(__name__)


@dataclass
class FeedHealth:
    """Health record of a single feed URL."""
    url: str
    last_check_at: Optional[datetime] = None
    last_error_at: Optional[datetime] = None
    last_error_category: Optional[str] = None
    last_error_detail: Optional[str] = None
    consecutive_failures: int = 0
    # Non-transient failures only; drives permanent invalidation
    consecutive_permanent_failures: int = 0
    is_permanently_invalid: bool = False
    requires_special_handling: bool = False
    special_handler_type: Optional[str] = None
    total_checks: int = 0
    successful_checks: int = 0

    def success_rate(self) -> float:
        """Calculate success rate percentage."""
        if self.total_checks == 0:
            return 0.0
        return (self.successful_checks / self.total_checks) * 100

    def is_healthy(self) -> bool:
        """A feed is healthy until it fails or is given up on."""
        return not self.is_permanently_invalid and self.consecutive_failures == 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("last_check_at", "last_error_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


class FeedHealthTracker:
    """
    Keeps one FeedHealth record per URL.

    A feed is marked permanently invalid after ``permanent_failure_threshold``
    consecutive non-transient failures. A successful validation clears the
    failure streak but not an explicit permanent invalidation.
    """

    def __init__(self, permanent_failure_threshold: Optional[int] = None):
        if permanent_failure_threshold is None:
            permanent_failure_threshold = get_validation_settings().permanent_failure_threshold
        if permanent_failure_threshold < 1:
            raise ValueError("permanent_failure_threshold must be at least 1")
        self.permanent_failure_threshold = permanent_failure_threshold
        self._health: Dict[str, FeedHealth] = {}
        self.logger = logger.bind(component="feed_health_tracker")

    def _get_or_create(self, url: str) -> FeedHealth:
        if url not in self._health:
            self._health[url] = FeedHealth(url=url)
        return self._health[url]

    def get_health(self, url: str) -> Optional[FeedHealth]:
        return self._health.get(url)

    def record_result(self, result: ValidationResult, checked_at: Optional[datetime] = None) -> FeedHealth:
        """
        Update the health record of ``result.url``.

        Args:
            result: Outcome of a validation
            checked_at: Check time, now by default

        Returns:
            The updated FeedHealth
        """
        now = checked_at or datetime.now(timezone.utc)
        health = self._get_or_create(result.url)
        health.last_check_at = now
        health.total_checks += 1

        if result.is_valid:
            health.successful_checks += 1
            health.consecutive_failures = 0
            health.consecutive_permanent_failures = 0
            if result.requires_special_handling:
                health.requires_special_handling = True
                health.special_handler_type = result.special_handler_type
            return health

        health.last_error_at = now
        health.last_error_category = result.error_category
        health.last_error_detail = result.error_detail
        health.consecutive_failures += 1

        if is_transient_result(result):
            health.consecutive_permanent_failures = 0
        else:
            health.consecutive_permanent_failures += 1

        if (
            not health.is_permanently_invalid
            and health.consecutive_permanent_failures >= self.permanent_failure_threshold
        ):
            self.mark_permanently_invalid(
                result.url,
                f"{health.consecutive_permanent_failures} consecutive failures: {result.error_detail}"
            )

        self.logger.debug(
            "Feed failure recorded",
            url=result.url,
            error_category=result.error_category,
            consecutive_failures=health.consecutive_failures
        )
        return health

    def record_results(self, results: List[ValidationResult]) -> List[FeedHealth]:
        return [self.record_result(result) for result in results]

    def reset_errors(self, url: str) -> FeedHealth:
        """Clear the error fields and failure streak of a feed."""
        health = self._get_or_create(url)
        health.last_error_at = None
        health.last_error_category = None
        health.last_error_detail = None
        health.consecutive_failures = 0
        health.consecutive_permanent_failures = 0
        return health

    def mark_permanently_invalid(self, url: str, reason: str) -> FeedHealth:
        health = self._get_or_create(url)
        health.is_permanently_invalid = True
        health.last_error_detail = reason
        self.logger.warning("Feed marked permanently invalid", url=url, reason=reason)
        return health

    def set_special_handling(self, url: str, handler_type: Optional[str]) -> FeedHealth:
        """Set or clear (``handler_type=None``) the dedicated handler of a feed."""
        health = self._get_or_create(url)
        health.requires_special_handling = handler_type is not None
        health.special_handler_type = handler_type
        return health

    def summary(self) -> Dict[str, Any]:
        records = list(self._health.values())
        return {
            "total_feeds": len(records),
            "healthy_feeds": sum(1 for h in records if h.is_healthy()),
            "failing_feeds": sum(1 for h in records if h.consecutive_failures > 0),
            "permanently_invalid_feeds": sum(1 for h in records if h.is_permanently_invalid),
            "special_handling_feeds": sum(1 for h in records if h.requires_special_handling),
        }
