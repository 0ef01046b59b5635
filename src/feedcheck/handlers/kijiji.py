"""
Handler for classified-listing feeds that block generic crawlers.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from ..fetching.errors import FeedFetchError
from ..fetching.http_fetcher import HttpFetcher
from ..parsing.feed_parser import XmlFeedParser
from ..shared.schemas import ErrorCategory

logger = structlog.get_logger(__name__)

SUMMARY_LENGTH = 200


@dataclass
class ListingItem:
    """A listing pulled from a KIJIJI feed."""
    id: str
    title: str
    content: str
    summary: str
    url: str
    source_url: str
    published_at: Optional[str] = None
    topics: List[str] = field(default_factory=list)


class KijijiHandler:
    """Fetches listing items through the fallback-capable fetcher."""

    handler_type = "KIJIJI"
    DEFAULT_TIMEOUT_MILLIS = 30000

    def __init__(self, fetcher: Optional[HttpFetcher] = None, parser: Optional[XmlFeedParser] = None):
        self.fetcher = fetcher or HttpFetcher(timeout_millis=self.DEFAULT_TIMEOUT_MILLIS)
        self.parser = parser or XmlFeedParser()
        self.logger = logger.bind(component="kijiji_handler")

    async def fetch_items(self, feed_url: str) -> List[ListingItem]:
        """
        Fetch and parse the listings of a feed.

        Raises:
            FeedFetchError: If the feed could not be retrieved or answered non-2xx
            FeedParsingError: If the document is not a feed
        """
        response = await self.fetcher.get(feed_url)
        if not response.ok:
            raise FeedFetchError(
                f"Failed to fetch feed: HTTP {response.status_code}",
                ErrorCategory.HTTP_STATUS,
                status_code=response.status_code,
            )

        feed_info = self.parser.parse(response.text)
        items = []
        for item in feed_info.items or []:
            item_id = item.guid or item.url or ""
            content = item.description or ""
            items.append(ListingItem(
                id=item_id,
                title=item.title,
                content=content,
                summary=content[:SUMMARY_LENGTH],
                url=item.url or "",
                source_url=feed_url,
                published_at=item.pub_date,
                topics=list(item.categories or []),
            ))

        self.logger.info("Fetched listings", url=feed_url, item_count=len(items))
        return items
