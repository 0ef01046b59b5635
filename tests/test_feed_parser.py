"""
Unit tests for RSS/Atom feed parser.
Tests dialect detection, field extraction and error handling.
"""
import pytest

from feedcheck.parsing.feed_parser import (
    XmlFeedParser, FeedParsingError, FeedXmlSyntaxError, UnsupportedFeedFormatError
)


class TestXmlFeedParser:
    """Test XmlFeedParser functionality."""

    @pytest.fixture
    def parser(self):
        """Create parser instance."""
        return XmlFeedParser()

    def test_parse_rss_2_0_feed(self, parser, sample_rss):
        """Test parsing RSS 2.0 channel and items."""
        feed = parser.parse(sample_rss)

        assert feed.title == "Test RSS Feed"
        assert feed.description == "A test RSS feed"
        assert feed.url == "https://example.com"
        assert feed.language == "en-us"
        assert feed.item_count == 2

        first = feed.items[0]
        assert first.title == "First Article"
        assert first.url == "https://example.com/article1"
        assert first.description == "First article description"
        assert first.pub_date == "Mon, 01 Jan 2024 12:00:00 GMT"
        assert first.guid == "article-1"
        assert first.author == "Jane Doe"
        assert first.categories == ["Technology", "News"]
        assert first.enclosure is None

    def test_rss_item_guid_falls_back_to_link(self, parser, sample_rss):
        """Test items without guid use their link as identifier."""
        second = parser.parse(sample_rss).items[1]

        assert second.guid == "https://example.com/article2"
        assert second.categories is None

    def test_rss_enclosure(self, parser, sample_rss):
        """Test enclosure attributes are extracted with an integer length."""
        enclosure = parser.parse(sample_rss).items[1].enclosure

        assert enclosure.url == "https://example.com/a.mp3"
        assert enclosure.type == "audio/mpeg"
        assert enclosure.length == 1024

    def test_parse_atom_feed(self, parser, sample_atom):
        """Test parsing Atom feed and entries."""
        feed = parser.parse(sample_atom)

        assert feed.title == "Test Atom Feed"
        assert feed.description == "A test Atom feed"
        assert feed.url == "https://example.com"
        assert feed.language == "en"
        assert feed.item_count == 1

        entry = feed.items[0]
        assert entry.title == "Atom Entry"
        assert entry.url == "https://example.com/entry1"
        assert entry.guid == "urn:uuid:entry1"
        assert entry.pub_date == "2024-01-01T12:00:00Z"
        assert entry.description == "Entry summary"
        assert entry.author == "John Smith"
        assert entry.categories == ["science"]

    def test_atom_without_namespace(self, parser):
        """Test a feed root without the Atom namespace is still Atom."""
        xml = """<feed>
            <title>Plain Feed</title>
            <link href="https://example.com/only"/>
            <entry><title>Entry</title><content>Body</content><summary>Short</summary>
                <published>2024-02-01T00:00:00Z</published></entry>
        </feed>"""

        feed = parser.parse(xml)

        assert feed.title == "Plain Feed"
        assert feed.description == "Plain Feed"
        assert feed.url == "https://example.com/only"
        assert feed.items[0].description == "Body"
        assert feed.items[0].pub_date == "2024-02-01T00:00:00Z"

    def test_rss_without_title(self, parser, rss_without_title):
        """Test missing title parses to None while description is kept."""
        feed = parser.parse(rss_without_title)

        assert feed.title is None
        assert feed.description == "Feed with no title"
        assert feed.items == []

    def test_parse_invalid_xml(self, parser):
        """Test malformed XML raises syntax error."""
        with pytest.raises(FeedXmlSyntaxError, match="Invalid XML"):
            parser.parse("<rss><channel><title>Broken")

    def test_parse_plain_text(self, parser):
        """Test non-XML text raises syntax error."""
        with pytest.raises(FeedXmlSyntaxError):
            parser.parse("this is just text")

    def test_parse_unsupported_feed_type(self, parser):
        """Test well-formed XML of another vocabulary is rejected."""
        with pytest.raises(UnsupportedFeedFormatError, match="Unsupported feed format"):
            parser.parse("<html><body>Not a feed</body></html>")

    def test_parse_rss_without_channel(self, parser):
        """Test an rss root without a channel is unsupported."""
        with pytest.raises(UnsupportedFeedFormatError):
            parser.parse('<rss version="2.0"></rss>')

    def test_errors_share_base_class(self):
        """Test parser errors can be caught together."""
        assert issubclass(FeedXmlSyntaxError, FeedParsingError)
        assert issubclass(UnsupportedFeedFormatError, FeedParsingError)

    def test_xml_cleaning(self, parser):
        """Test BOM, surrounding whitespace and &nbsp; are tolerated."""
        xml = "\ufeff\n  <rss><channel><title>A&nbsp;Title</title></channel></rss>  "

        feed = parser.parse(xml)

        assert feed.title == "A Title"


class TestEdgeCases:
    """Test edge cases in feed parsing."""

    @pytest.fixture
    def parser(self):
        return XmlFeedParser()

    def test_feed_with_cdata(self, parser):
        """Test CDATA content is returned as text."""
        xml = """<rss version="2.0"><channel><title>CDATA Feed</title>
            <item><title><![CDATA[Title with <b>markup</b>]]></title>
            <description><![CDATA[<p>HTML body</p>]]></description></item>
        </channel></rss>"""

        item = parser.parse(xml).items[0]

        assert item.title == "Title with <b>markup</b>"
        assert item.description == "<p>HTML body</p>"

    def test_item_without_title(self, parser):
        """Test items with no title get an empty string."""
        xml = "<rss><channel><title>T</title><item><link>https://example.com/x</link></item></channel></rss>"

        item = parser.parse(xml).items[0]

        assert item.title == ""
        assert item.guid == "https://example.com/x"

    def test_non_numeric_enclosure_length(self, parser):
        """Test an unparseable enclosure length is dropped."""
        xml = """<rss><channel><title>T</title><item><title>I</title>
            <enclosure url="https://example.com/v.mp4" type="video/mp4" length="unknown"/>
        </item></channel></rss>"""

        enclosure = parser.parse(xml).items[0].enclosure

        assert enclosure.url == "https://example.com/v.mp4"
        assert enclosure.length is None

    def test_parse_is_pure(self, parser, sample_rss):
        """Test parsing the same text twice gives equal results."""
        assert parser.parse(sample_rss) == parser.parse(sample_rss)
