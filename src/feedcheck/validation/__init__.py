"""
Feed validation for feedcheck.

Composes fetching, parsing and structural checks into one end-to-end
operation, plus batch validation with per-category summaries.
"""

from .structure_validator import FeedStructureValidator
from .special_handling import (
    KIJIJI_HANDLER,
    SpecialHandlingDetector,
    SpecialHandlingRule,
)
from .orchestrator import (
    FeedValidationOrchestrator,
    is_valid_feed_url,
)
