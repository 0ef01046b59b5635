"""
HTTP Fetcher with httpx
Retrieves feed documents for validation.

Each request is bounded by a configurable timeout. Servers that answer the
default User-Agent with 403 get exactly one more attempt with the fallback
User-Agent, and the returned response records whether that happened.
Transport failures are raised as classified FeedFetchError instances.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx
import structlog

from ..shared.config import FetcherSettings, get_fetcher_settings
from ..shared.schemas import ErrorCategory
from .error_classifier import classify_exception
from .errors import FeedFetchError

logger = structlog.get_logger(__name__)


@dataclass
class FetchResponse:
    """Response of a feed request."""
    url: str
    status_code: int
    status_text: str
    text: str
    headers: Dict[str, str] = field(default_factory=dict)
    used_fallback: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpFetcher:
    """
    Async feed fetcher using httpx.

    The transport can be injected (e.g. ``httpx.MockTransport``) so callers
    and tests control the network layer explicitly. Every call opens its own
    client; concurrent calls share no connections.
    """

    ERROR_CODE_HEADER = "x-error-code"
    ERROR_MESSAGE_HEADER = "x-error-message"

    # Error markers set by intermediary transports, checked before status handling
    HEADER_ERROR_MARKERS = {
        "CERT_HAS_EXPIRED": (ErrorCategory.SSL_ERROR, "SSL error occurred"),
        "ENOTFOUND": (ErrorCategory.DNS_ERROR, "DNS lookup failed"),
    }

    def __init__(
        self,
        default_user_agent: Optional[str] = None,
        fallback_user_agent: Optional[str] = None,
        timeout_millis: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[FetcherSettings] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            default_user_agent: User-Agent sent on the first attempt
            fallback_user_agent: User-Agent sent when the first attempt gets a 403
            timeout_millis: Overall time budget for one request
            transport: httpx transport to send requests through
            settings: Settings used for any argument left unset
        """
        settings = settings or get_fetcher_settings()
        self.default_user_agent = default_user_agent or settings.default_user_agent
        self.fallback_user_agent = fallback_user_agent or settings.fallback_user_agent
        self.timeout_millis = timeout_millis if timeout_millis is not None else settings.timeout_millis
        if self.timeout_millis <= 0:
            raise ValueError("timeout_millis must be positive")
        self.accept_header = settings.accept_header
        self.transport = transport
        self.logger = logger.bind(component="http_fetcher")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000.0

    async def get(self, url: str) -> FetchResponse:
        """
        Fetch a URL, retrying once with the fallback User-Agent on 403.

        Non-2xx responses are returned, not raised; the caller decides how to
        report them.

        Raises:
            FeedFetchError: If no response could be obtained, or the response
                carries an error marker header
        """
        response = await self._request(url, self.default_user_agent)
        used_fallback = False

        if response.status_code == 403:
            self.logger.info(
                "Retrying with fallback user agent",
                url=url,
                user_agent=self.fallback_user_agent
            )
            response = await self._request(url, self.fallback_user_agent)
            used_fallback = True

        self._raise_for_error_markers(url, response)

        return FetchResponse(
            url=url,
            status_code=response.status_code,
            status_text=response.reason_phrase,
            text=response.text,
            headers={key.lower(): value for key, value in response.headers.items()},
            used_fallback=used_fallback,
        )

    async def _request(self, url: str, user_agent: str) -> httpx.Response:
        headers = {
            "User-Agent": user_agent,
            "Accept": self.accept_header,
        }
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=httpx.Timeout(self.timeout_seconds),
                follow_redirects=True,
                headers=headers,
            ) as client:
                # wait_for cancels the in-flight request once the budget is spent
                response = await asyncio.wait_for(client.get(url), timeout=self.timeout_seconds)
        except (httpx.HTTPError, asyncio.TimeoutError, OSError) as e:
            classified = classify_exception(e)
            self.logger.warning(
                "Feed request failed",
                url=url,
                error_category=classified.category.value,
                error=str(e) or type(e).__name__
            )
            raise FeedFetchError(
                classified.detail,
                classified.category,
                status_code=classified.status_code,
                original_error=e,
            ) from e

        self.logger.debug(
            "Feed request completed",
            url=url,
            status_code=response.status_code,
            user_agent=user_agent
        )
        return response

    def _raise_for_error_markers(self, url: str, response: httpx.Response) -> None:
        error_code = response.headers.get(self.ERROR_CODE_HEADER)
        if not error_code:
            return

        marker = self.HEADER_ERROR_MARKERS.get(error_code.strip().upper())
        if marker is None:
            return

        category, default_message = marker
        message = response.headers.get(self.ERROR_MESSAGE_HEADER) or default_message
        self.logger.warning(
            "Response carries error marker",
            url=url,
            error_code=error_code,
            error_category=category.value
        )
        raise FeedFetchError(message, category)
