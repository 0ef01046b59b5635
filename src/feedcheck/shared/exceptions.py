"""
Shared exception types for feedcheck.
"""


class FeedCheckError(Exception):
    """Base class for every error raised by feedcheck components."""
    pass


class ConfigurationError(FeedCheckError):
    """Raised when settings are missing or invalid."""
    pass
