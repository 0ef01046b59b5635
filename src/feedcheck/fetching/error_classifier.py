"""
Error classification for failed feed requests.

Fetch failures arrive in many shapes: httpx transport errors, asyncio
timeouts, OS-level resolver and TLS errors wrapped inside them, or errors
that only describe themselves through a message or an error code. They are
mapped to a category by walking one ordered list of rules and taking the
first rule that matches:

    TIMEOUT -> DNS_ERROR -> SSL_ERROR -> HTTP_STATUS -> NETWORK_ERROR

A message may satisfy several rules (a TLS handshake that timed out matches
both TIMEOUT and SSL_ERROR); the earlier rule always wins.
"""
import asyncio
import errno
import re
import socket
import ssl
from dataclasses import dataclass
from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple

import httpx

from ..shared.schemas import ErrorCategory
from .errors import FeedFetchError


class ClassifiedError(NamedTuple):
    """Category, detail and optional HTTP status for a failure."""
    category: ErrorCategory
    detail: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class ErrorRule:
    """One entry of the classification precedence list."""
    name: str
    category: ErrorCategory
    predicate: Callable[[BaseException], bool]
    default_detail: str


DNS_ERROR_CODES = frozenset({"ENOTFOUND", "EAI_AGAIN", "EAI_NONAME"})
SSL_ERROR_CODES = frozenset({
    "CERT_HAS_EXPIRED",
    "CERT_ERROR",
    "UNABLE_TO_VERIFY_LEAF_SIGNATURE",
    "DEPTH_ZERO_SELF_SIGNED_CERT",
    "SELF_SIGNED_CERT_IN_CHAIN",
    "ERR_TLS_CERT_ALTNAME_INVALID",
})


def _phrase_pattern(*phrases: str) -> re.Pattern:
    """Match whole phrases only, never a label inside a hostname or identifier."""
    alternatives = "|".join(re.escape(phrase) for phrase in phrases)
    return re.compile(rf"(?<![\w.-])(?:{alternatives})(?![\w-]|\.\w)")


TIMEOUT_PATTERN = _phrase_pattern("timed out", "timeout", "etimedout", "aborterror")
# Resolver messages only; a bare "dns" would also match hosts like dnsimple.com
DNS_PATTERN = _phrase_pattern(
    "enotfound",
    "getaddrinfo",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "no address associated with hostname",
)
SSL_PATTERN = _phrase_pattern("certificate", "ssl", "tls", "unable to verify")


def iter_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield the exception and everything it was raised from."""
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop(0)
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.append(current.__cause__)
        pending.append(current.__context__)
        original = getattr(current, "original_error", None)
        if isinstance(original, BaseException):
            pending.append(original)


def _messages(exc: BaseException) -> str:
    parts = []
    for e in iter_exception_chain(exc):
        parts.append(type(e).__name__)
        parts.append(str(e))
    return " ".join(parts).lower()


def _codes(exc: BaseException) -> List[str]:
    codes = []
    for e in iter_exception_chain(exc):
        code = getattr(e, "code", None)
        if isinstance(code, str):
            codes.append(code.upper())
        # OSError.errno as its symbolic name, e.g. 110 -> ETIMEDOUT
        errno_value = getattr(e, "errno", None)
        if isinstance(errno_value, int) and errno_value in errno.errorcode:
            codes.append(errno.errorcode[errno_value])
    return codes


def _status_code(exc: BaseException) -> Optional[int]:
    for e in iter_exception_chain(exc):
        if isinstance(e, httpx.HTTPStatusError):
            return e.response.status_code
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None


def _is_timeout(exc: BaseException) -> bool:
    for e in iter_exception_chain(exc):
        if isinstance(e, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError, socket.timeout)):
            return True
    if "ETIMEDOUT" in _codes(exc):
        return True
    return TIMEOUT_PATTERN.search(_messages(exc)) is not None


def _is_dns_failure(exc: BaseException) -> bool:
    for e in iter_exception_chain(exc):
        if isinstance(e, socket.gaierror):
            return True
    if DNS_ERROR_CODES.intersection(_codes(exc)):
        return True
    return DNS_PATTERN.search(_messages(exc)) is not None


def _is_ssl_failure(exc: BaseException) -> bool:
    for e in iter_exception_chain(exc):
        if isinstance(e, (ssl.SSLError, ssl.CertificateError)):
            return True
    if SSL_ERROR_CODES.intersection(_codes(exc)):
        return True
    return SSL_PATTERN.search(_messages(exc)) is not None


def _has_status_code(exc: BaseException) -> bool:
    return _status_code(exc) is not None


def _is_network_failure(exc: BaseException) -> bool:
    for e in iter_exception_chain(exc):
        if isinstance(e, (httpx.TransportError, OSError)):
            return True
    return False


ERROR_RULES: Tuple[ErrorRule, ...] = (
    ErrorRule("timeout", ErrorCategory.TIMEOUT, _is_timeout, "Request timed out"),
    ErrorRule("dns", ErrorCategory.DNS_ERROR, _is_dns_failure, "DNS lookup failed"),
    ErrorRule("ssl", ErrorCategory.SSL_ERROR, _is_ssl_failure, "SSL error occurred"),
    ErrorRule("http_status", ErrorCategory.HTTP_STATUS, _has_status_code, "HTTP error occurred"),
    ErrorRule("network", ErrorCategory.NETWORK_ERROR, _is_network_failure, "Network error occurred"),
)


def _detail_for(rule_category: ErrorCategory, default_detail: str, exc: BaseException) -> str:
    if rule_category == ErrorCategory.TIMEOUT:
        return default_detail
    if rule_category == ErrorCategory.HTTP_STATUS:
        return f"HTTP {_status_code(exc)}: {exc}" if str(exc) else f"HTTP {_status_code(exc)}"
    message = str(exc).strip()
    if not message or message == default_detail:
        return default_detail
    return f"{default_detail}: {message}"


def match_rule(exc: BaseException) -> Optional[ErrorRule]:
    """Return the first rule matching the exception, or None."""
    for rule in ERROR_RULES:
        if rule.predicate(exc):
            return rule
    return None


def classify_exception(
    exc: BaseException,
    default: ErrorCategory = ErrorCategory.NETWORK_ERROR,
) -> ClassifiedError:
    """
    Classify a failure raised while fetching a feed.

    Args:
        exc: The raised exception
        default: Category used when no rule matches

    Returns:
        ClassifiedError with category, detail and HTTP status if one is attached
    """
    if isinstance(exc, FeedFetchError):
        return ClassifiedError(exc.category, str(exc) or "Request failed", exc.status_code)

    rule = match_rule(exc)
    if rule is None:
        message = str(exc).strip() or type(exc).__name__
        return ClassifiedError(ErrorCategory(default), message, _status_code(exc))

    status_code = _status_code(exc) if rule.category == ErrorCategory.HTTP_STATUS else None
    return ClassifiedError(rule.category, _detail_for(rule.category, rule.default_detail, exc), status_code)
