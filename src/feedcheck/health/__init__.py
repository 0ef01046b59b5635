"""Feed health bookkeeping built on validation results."""

from .feed_health import FeedHealth, FeedHealthTracker
