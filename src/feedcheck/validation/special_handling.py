"""
Special handling detection.

A feed is flagged for a dedicated handler when something about how it was
retrieved shows that the generic pipeline is not enough. Today the only
signal is the fallback User-Agent retry, which marks classified-listing
sites that block crawlers (handler type ``KIJIJI``). Further rules can key
off other response properties without changing the ValidationResult shape.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..fetching.http_fetcher import FetchResponse

KIJIJI_HANDLER = "KIJIJI"


@dataclass(frozen=True)
class SpecialHandlingRule:
    handler_type: str
    predicate: Callable[[FetchResponse], bool]


def _needed_fallback_agent(response: FetchResponse) -> bool:
    return response.used_fallback


DEFAULT_RULES: List[SpecialHandlingRule] = [
    SpecialHandlingRule(KIJIJI_HANDLER, _needed_fallback_agent),
]


class SpecialHandlingDetector:
    """Returns the handler type of the first matching rule."""

    def __init__(self, rules: Optional[Sequence[SpecialHandlingRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def detect(self, response: FetchResponse) -> Optional[str]:
        for rule in self.rules:
            if rule.predicate(response):
                return rule.handler_type
        return None
