"""
Shared fixtures for feedcheck tests.
"""
import os
from typing import Callable, List

import httpx
import pytest

from feedcheck.shared.config import reset_settings


SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
    <channel>
        <title>Test RSS Feed</title>
        <link>https://example.com</link>
        <description>A test RSS feed</description>
        <language>en-us</language>
        <item>
            <title>First Article</title>
            <link>https://example.com/article1</link>
            <description>First article description</description>
            <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
            <guid>article-1</guid>
            <dc:creator>Jane Doe</dc:creator>
            <category>Technology</category>
            <category>News</category>
        </item>
        <item>
            <title>Second Article</title>
            <link>https://example.com/article2</link>
            <description>Second article description</description>
            <enclosure url="https://example.com/a.mp3" type="audio/mpeg" length="1024"/>
        </item>
    </channel>
</rss>"""

SAMPLE_ATOM = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xml:lang="en">
    <title>Test Atom Feed</title>
    <subtitle>A test Atom feed</subtitle>
    <link rel="self" href="https://example.com/feed.atom"/>
    <link rel="alternate" href="https://example.com"/>
    <id>urn:uuid:feed</id>
    <updated>2024-01-01T12:00:00Z</updated>
    <entry>
        <title>Atom Entry</title>
        <link href="https://example.com/entry1"/>
        <id>urn:uuid:entry1</id>
        <published>2024-01-01T10:00:00Z</published>
        <updated>2024-01-01T12:00:00Z</updated>
        <summary>Entry summary</summary>
        <author><name>John Smith</name></author>
        <category term="science"/>
    </entry>
</feed>"""

RSS_WITHOUT_TITLE = """<?xml version="1.0"?>
<rss version="2.0">
    <channel>
        <description>Feed with no title</description>
    </channel>
</rss>"""

RSS_WITHOUT_ITEMS = """<?xml version="1.0"?>
<rss version="2.0">
    <channel>
        <title>Quiet Feed</title>
        <description>Nothing published yet</description>
    </channel>
</rss>"""


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from FEEDCHECK_ environment variables and cached settings."""
    for key in list(os.environ):
        if key.upper().startswith("FEEDCHECK_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sample_rss():
    return SAMPLE_RSS


@pytest.fixture
def sample_atom():
    return SAMPLE_ATOM


@pytest.fixture
def rss_without_title():
    return RSS_WITHOUT_TITLE


@pytest.fixture
def rss_without_items():
    return RSS_WITHOUT_ITEMS


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_transport():
    """Build a RecordingTransport from a request handler."""
    return RecordingTransport
