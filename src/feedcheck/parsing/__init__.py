"""RSS 2.0 and Atom parsing into the normalized feed representation."""

from .feed_parser import (
    FeedParsingError,
    FeedXmlSyntaxError,
    UnsupportedFeedFormatError,
    XmlFeedParser,
)
