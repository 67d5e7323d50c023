"""
Shared aiohttp plumbing for the upstream JSON APIs, rate limited with aiolimiter.
"""
from typing import Any, Dict, Optional

from aiohttp import ClientSession, ClientTimeout, ContentTypeError
from aiolimiter import AsyncLimiter
from loguru import logger

from station_finder.config import HTTP_TIMEOUT_SECONDS, REQUESTS_PER_SECOND


class ApiResponseError(Exception):
    """Upstream API answered with an error status or an unusable body."""


class JsonHttpClient:
    """
    Base client owning one aiohttp session and one token-bucket limiter.
    Instances are constructed explicitly and passed to whoever needs them.
    """
    name = "http"

    def __init__(
        self,
        requests_per_second: float = REQUESTS_PER_SECOND,
        timeout_seconds: float = HTTP_TIMEOUT_SECONDS,
        session: Optional[ClientSession] = None,
    ):
        self.rate_limiter = AsyncLimiter(max_rate=requests_per_second, time_period=1.0)
        self.timeout = ClientTimeout(total=timeout_seconds)
        self._session = session

    async def _get_session(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self.timeout)
        return self._session

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        allow_error_status: bool = False,
    ) -> Dict[str, Any]:
        """
        Send a GET request and return the decoded JSON body.

        Args:
            url: Endpoint URL.
            params: Query string parameters.
            allow_error_status: Return the body of non-2xx responses instead of raising.

        Returns:
            Parsed JSON object.
        """
        async with self.rate_limiter:
            session = await self._get_session()
            try:
                async with session.get(url, params=params) as resp:
                    try:
                        data = await resp.json(content_type=None)
                    except (ContentTypeError, ValueError) as e:
                        raise ApiResponseError(f"{self.name}: non-JSON body (HTTP {resp.status})") from e

                    if resp.status >= 400 and not allow_error_status:
                        raise ApiResponseError(f"{self.name}: HTTP {resp.status}")
                    if not isinstance(data, dict):
                        raise ApiResponseError(f"{self.name}: unexpected body type {type(data).__name__}")
                    return data
            except Exception as e:
                logger.debug(f"⚠️ {self.name} GET request failed: {e}")
                raise

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
