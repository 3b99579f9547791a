"""
Client for the remote news service.
"""
import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp
import async_timeout

from newsdesk.config import get_config
from newsdesk.core.errors import RequestCancelledError, ServerError
from newsdesk.utils.http import JSON_HEADERS, is_success

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class FetchParams:
    """
    Parameters of a news request.

    Values are sent as given; sanitize ``search_query`` before building
    the params.
    """
    countries: List[str]
    categories: List[str]
    search_query: Optional[str] = None
    date_range: Optional[str] = None
    sources: Optional[List[str]] = None

    def __post_init__(self):
        if not self.countries:
            raise ValueError("At least one country is required")
        if not self.categories:
            raise ValueError("At least one category is required")

    def to_body(self) -> Dict[str, Any]:
        """Build the JSON request body, leaving out unset fields."""
        body = {
            "countries": list(self.countries),
            "categories": list(self.categories),
            "searchQuery": self.search_query,
            "dateRange": self.date_range,
            "sources": list(self.sources) if self.sources is not None else None,
        }
        return {key: value for key, value in body.items() if value is not None}


class NewsFetcher:
    """
    Fetches ranked articles from the news service.

    Failures are never retried here; callers decide on retry policy.
    """
    def __init__(
        self,
        base_url: Optional[str] = None,
        news_path: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the NewsFetcher.

        Args:
            base_url: Base URL of the news service API
            news_path: Path of the news endpoint under ``base_url``
            timeout: Request timeout in seconds, None or 0 for no timeout
            session: Session to send requests with; created lazily if omitted
        """
        self.base_url = (base_url or get_config('api.base_url')).rstrip('/')
        self.news_path = news_path or get_config('api.news_path', '/news')
        self.timeout = timeout if timeout is not None else get_config('http.timeout_seconds')
        self._session = session
        self._owns_session = session is None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.news_path}"

    @property
    def session(self):
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=JSON_HEADERS)
        return self._session

    async def close(self):
        """Close the aiohttp session if this fetcher created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        async with async_timeout.timeout(self.timeout or None):
            async with self.session.post(self.endpoint, json=body, headers=JSON_HEADERS) as response:
                if not is_success(response.status):
                    raise ServerError(response.status)
                return await response.json()

    async def fetch_news(self, params: FetchParams, cancel: Optional[asyncio.Event] = None) -> Dict[str, Any]:
        """
        Send one news request.

        Args:
            params: Countries, categories and optional filters
            cancel: Optional signal; once set the request is abandoned

        Returns:
            The parsed response payload, unchanged

        Raises:
            ServerError: The service answered with a non-2xx status
            RequestCancelledError: ``cancel`` was set before a response arrived
            aiohttp.ClientError, asyncio.TimeoutError: Transport failures
        """
        body = params.to_body()
        logger.debug(f"POST {self.endpoint} {body}")
        try:
            if cancel is None:
                return await self._post(body)
            return await self._post_cancellable(body, cancel)
        except ServerError as e:
            logger.error(f"News request failed: {e}")
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"News request to {self.endpoint} failed: {e!r}")
            raise

    async def _post_cancellable(self, body: Dict[str, Any], cancel: asyncio.Event) -> Dict[str, Any]:
        if cancel.is_set():
            raise RequestCancelledError("News request cancelled before it was sent")

        request = asyncio.ensure_future(self._post(body))
        cancelled = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({request, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            cancelled.cancel()

        if request.done():
            return request.result()

        request.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await request
        raise RequestCancelledError("News request cancelled")
