"""
Unit tests for feed structure validation.
"""
from unittest.mock import Mock

import pytest

from feedcheck.parsing.feed_parser import XmlFeedParser, UnsupportedFeedFormatError
from feedcheck.shared.schemas import ErrorCategory
from feedcheck.validation.structure_validator import FeedStructureValidator


class TestFeedStructureValidator:
    """Test FeedStructureValidator verdicts."""

    @pytest.fixture
    def validator(self):
        return FeedStructureValidator()

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_content(self, text):
        """Test empty content fails without invoking the parser."""
        parser = Mock(spec=XmlFeedParser)
        validator = FeedStructureValidator(parser=parser)

        result = validator.validate(text, "https://example.com/feed")

        assert result.is_valid is False
        assert result.error_category == ErrorCategory.VALIDATION_ERROR
        assert result.error_detail == "Empty feed content"
        parser.parse.assert_not_called()

    def test_invalid_xml(self, validator):
        """Test malformed XML yields the short syntax detail."""
        result = validator.validate("not xml at all")

        assert result.is_valid is False
        assert result.error_category == ErrorCategory.VALIDATION_ERROR
        assert result.error_detail == "Invalid XML"

    def test_unsupported_format(self, validator):
        """Test non-feed XML yields a wrapped parse detail."""
        result = validator.validate("<html><body/></html>")

        assert result.is_valid is False
        assert result.error_detail == "Failed to parse XML: Unsupported feed format"

    def test_unexpected_parser_error_is_contained(self):
        """Test any parser exception becomes a validation failure."""
        parser = Mock(spec=XmlFeedParser)
        parser.parse.side_effect = UnsupportedFeedFormatError("odd root")
        validator = FeedStructureValidator(parser=parser)

        result = validator.validate("<x/>")

        assert result.error_detail == "Failed to parse XML: odd root"

    def test_missing_title_keeps_feed_info(self, validator, rss_without_title):
        """Test a missing title fails but keeps the partial feed info."""
        result = validator.validate(rss_without_title)

        assert result.is_valid is False
        assert result.error_category == ErrorCategory.VALIDATION_ERROR
        assert result.error_detail == "Missing required elements: title"
        assert result.feed_info is not None
        assert result.feed_info.description == "Feed with no title"

    def test_valid_feed(self, validator, sample_rss):
        """Test a complete feed passes with items attached."""
        result = validator.validate(sample_rss, "https://example.com/feed")

        assert result.is_valid is True
        assert result.error_category is None
        assert result.error_detail is None
        assert result.url == "https://example.com/feed"
        assert result.feed_info.title == "Test RSS Feed"
        assert len(result.feed_info.items) == 2

    def test_feed_without_items_passes_structure(self, validator, rss_without_items):
        """Test an item-less feed passes structural checks with items unset."""
        result = validator.validate(rss_without_items)

        assert result.is_valid is True
        assert result.feed_info.title == "Quiet Feed"
        assert result.feed_info.items is None
