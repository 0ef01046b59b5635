"""
Tests for the package-level convenience functions.
"""
import pytest

import feedcheck


class TestConvenienceFunctions:
    """Test validate_feed / validate_feeds shortcuts."""

    @pytest.mark.asyncio
    async def test_validate_feed_rejects_malformed_url(self):
        result = await feedcheck.validate_feed("not-a-url")

        assert result.is_valid is False
        assert result.error_category == feedcheck.ErrorCategory.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_validate_feeds_summary(self):
        summary = await feedcheck.validate_feeds(["not-a-url", "also bad"])

        assert summary.total_checked == 2
        assert summary.invalid_feeds == 2
        assert summary.errors_by_category == {"VALIDATION_ERROR": 2}

    def test_exports(self):
        for name in feedcheck.__all__:
            assert hasattr(feedcheck, name)
