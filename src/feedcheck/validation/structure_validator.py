"""
Structural validation of feed documents.
"""
from typing import Optional

import structlog

from ..parsing.feed_parser import FeedXmlSyntaxError, XmlFeedParser
from ..shared.schemas import ErrorCategory, ValidationResult

logger = structlog.get_logger(__name__)


class FeedStructureValidator:
    """
    Parses a feed document and checks that it has the required elements.

    ``validate`` never raises; every problem becomes an invalid
    ValidationResult with category VALIDATION_ERROR. A feed without items
    still passes here, the orchestrator decides what an empty feed means.
    """

    REQUIRED_ELEMENTS = ("title",)

    def __init__(self, parser: Optional[XmlFeedParser] = None):
        self.parser = parser or XmlFeedParser()
        self.logger = logger.bind(component="structure_validator")

    def validate(self, xml_text: str, url: str = "") -> ValidationResult:
        if not xml_text or not xml_text.strip():
            return ValidationResult.failure(url, ErrorCategory.VALIDATION_ERROR, "Empty feed content")

        try:
            feed_info = self.parser.parse(xml_text)
        except FeedXmlSyntaxError as e:
            self.logger.debug("Feed is not well-formed XML", url=url, error=str(e))
            return ValidationResult.failure(url, ErrorCategory.VALIDATION_ERROR, "Invalid XML")
        except Exception as e:
            self.logger.debug("Feed could not be parsed", url=url, error=str(e))
            return ValidationResult.failure(
                url, ErrorCategory.VALIDATION_ERROR, f"Failed to parse XML: {e}"
            )

        missing = [name for name in self.REQUIRED_ELEMENTS if not getattr(feed_info, name)]
        if missing:
            return ValidationResult.failure(
                url,
                ErrorCategory.VALIDATION_ERROR,
                f"Missing required elements: {', '.join(missing)}",
                feed_info=feed_info,
            )

        if not feed_info.items:
            feed_info = feed_info.model_copy(update={"items": None})

        return ValidationResult.success(url, feed_info)
