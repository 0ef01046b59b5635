"""
RSS/Atom Feed Parser

This module parses RSS 2.0 and Atom documents into the normalized FeedInfo
representation. It performs no I/O; the result depends only on the input
text. Malformed XML and documents of an unsupported dialect raise distinct
exceptions so callers can report them separately.
"""
import xml.etree.ElementTree as ET
from typing import List, Optional

import structlog

from ..shared.exceptions import FeedCheckError
from ..shared.schemas import FeedEnclosure, FeedInfo, FeedItem

logger = structlog.get_logger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
DC_NS = "http://purl.org/dc/elements/1.1/"
XML_NS = "http://www.w3.org/XML/1998/namespace"


class FeedParsingError(FeedCheckError):
    """Raised when feed parsing fails."""
    pass


class FeedXmlSyntaxError(FeedParsingError):
    """Raised when the document is not well-formed XML."""
    pass


class UnsupportedFeedFormatError(FeedParsingError):
    """Raised when the document is XML but neither RSS 2.0 nor Atom."""

    def __init__(self, message: str = "Unsupported feed format"):
        super().__init__(message)


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _text(elem: Optional[ET.Element]) -> Optional[str]:
    """Whitespace-trimmed text content of an element, None when empty."""
    if elem is None:
        return None
    text = "".join(elem.itertext()).strip()
    return text or None


class XmlFeedParser:
    """
    RSS 2.0 / Atom parser.

    Dialect detection:
    - ``<rss>`` root with a ``<channel>`` child -> RSS 2.0
    - ``<feed>`` root (with or without the Atom namespace) -> Atom
    - anything else -> UnsupportedFeedFormatError
    """

    def __init__(self):
        self.logger = logger.bind(component="feed_parser")

    def parse(self, xml_text: str) -> FeedInfo:
        """
        Parse feed XML into FeedInfo.

        Args:
            xml_text: Raw feed document

        Returns:
            FeedInfo with every item found (possibly an empty list)

        Raises:
            FeedXmlSyntaxError: If the text is not well-formed XML
            UnsupportedFeedFormatError: If the XML is not RSS 2.0 or Atom
            FeedParsingError: For any other parsing failure
        """
        try:
            root = ET.fromstring(self._clean_xml(xml_text))
        except ET.ParseError as e:
            raise FeedXmlSyntaxError(f"Invalid XML: {e}") from e

        try:
            tag = _local_name(root.tag).lower()
            if tag == "rss":
                channel = root.find("channel")
                if channel is not None:
                    return self._parse_rss(channel)
            elif tag == "feed":
                return self._parse_atom(root)
        except FeedParsingError:
            raise
        except Exception as e:
            raise FeedParsingError(f"Unexpected error during parsing: {e}") from e

        self.logger.debug("Unsupported feed root", root_tag=root.tag)
        raise UnsupportedFeedFormatError()

    def _clean_xml(self, xml_text: str) -> str:
        """Strip a BOM and surrounding whitespace, and tolerate stray &nbsp;."""
        if xml_text.startswith("\ufeff"):
            xml_text = xml_text[1:]
        xml_text = xml_text.strip()
        return xml_text.replace("&nbsp;", " ")

    # RSS 2.0

    def _parse_rss(self, channel: ET.Element) -> FeedInfo:
        items = [self._parse_rss_item(item) for item in channel.findall("item")]
        return FeedInfo(
            title=_text(channel.find("title")),
            description=_text(channel.find("description")) or "",
            url=_text(channel.find("link")),
            language=_text(channel.find("language")),
            items=items,
        )

    def _parse_rss_item(self, item: ET.Element) -> FeedItem:
        link = _text(item.find("link"))

        categories = [text for text in (_text(c) for c in item.findall("category")) if text]

        enclosure = None
        enc_elem = item.find("enclosure")
        if enc_elem is not None:
            length = enc_elem.get("length", "").strip()
            enclosure = FeedEnclosure(
                url=enc_elem.get("url"),
                type=enc_elem.get("type"),
                length=int(length) if length.isdigit() else None,
            )

        return FeedItem(
            title=_text(item.find("title")) or "",
            description=_text(item.find("description")),
            url=link,
            pub_date=_text(item.find("pubDate")),
            guid=_text(item.find("guid")) or link,
            author=_text(item.find("author")) or _text(item.find(f"{{{DC_NS}}}creator")),
            categories=categories or None,
            enclosure=enclosure,
        )

    # Atom

    def _atom_find(self, elem: ET.Element, name: str) -> Optional[ET.Element]:
        found = elem.find(f"{{{ATOM_NS}}}{name}")
        if found is None:
            found = elem.find(name)  # Try without namespace
        return found

    def _atom_findall(self, elem: ET.Element, name: str) -> List[ET.Element]:
        found = elem.findall(f"{{{ATOM_NS}}}{name}")
        if not found:
            found = elem.findall(name)
        return found

    def _atom_link(self, elem: ET.Element) -> Optional[str]:
        """Pick the alternate (or unmarked) link, else the first link."""
        links = self._atom_findall(elem, "link")
        if not links:
            return None
        for link in links:
            if link.get("rel") in (None, "", "alternate") and link.get("href"):
                return link.get("href").strip()
        href = links[0].get("href")
        return href.strip() if href else None

    def _parse_atom(self, feed: ET.Element) -> FeedInfo:
        title = _text(self._atom_find(feed, "title"))
        items = [self._parse_atom_entry(entry) for entry in self._atom_findall(feed, "entry")]
        return FeedInfo(
            title=title,
            description=_text(self._atom_find(feed, "subtitle")) or title or "",
            url=self._atom_link(feed),
            language=feed.get(f"{{{XML_NS}}}lang"),
            items=items,
        )

    def _parse_atom_entry(self, entry: ET.Element) -> FeedItem:
        author = None
        author_elem = self._atom_find(entry, "author")
        if author_elem is not None:
            author = _text(self._atom_find(author_elem, "name"))

        categories = [
            term.strip() for term in (c.get("term") for c in self._atom_findall(entry, "category"))
            if term and term.strip()
        ]

        return FeedItem(
            title=_text(self._atom_find(entry, "title")) or "",
            description=_text(self._atom_find(entry, "content")) or _text(self._atom_find(entry, "summary")),
            url=self._atom_link(entry),
            pub_date=_text(self._atom_find(entry, "updated")) or _text(self._atom_find(entry, "published")),
            guid=_text(self._atom_find(entry, "id")),
            author=author,
            categories=categories or None,
        )
