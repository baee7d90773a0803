"""
Base class for candidate intelligence feeds.

A feed contributes extra bucket names for a target beyond the local
permutations (keyword search APIs, scraped indexes, ...). The aggregator
calls fetch() on each configured feed and unions the results.

To add a new feed:
1. Create a new file in s3checker/feeds/
2. Subclass BaseFeed and implement fetch()
3. Register it in s3checker/feeds/__init__.py FEED_REGISTRY
"""

from abc import ABC, abstractmethod
from typing import Optional, Set

import httpx
from loguru import logger

from s3checker.core.config import settings
from s3checker.core.error_handler import error_handler


class BaseFeed(ABC):
    """Abstract base class for candidate feeds."""

    name: str = "base"
    description: str = ""
    requires_api_key: bool = False

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the feed.

        Args:
            timeout: Request timeout in seconds (defaults to settings.FEED_TIMEOUT)
            transport: Optional httpx transport, used by tests
        """
        self.timeout = timeout if timeout is not None else settings.FEED_TIMEOUT
        self.transport = transport

    @abstractmethod
    async def fetch(self, target: str) -> Set[str]:
        """
        Return candidate bucket names for the target.

        Implementations return an empty set on any failure instead of
        raising.
        """
        raise NotImplementedError("Subclass must implement fetch() method")

    def is_available(self) -> bool:
        """Check if this feed can run (API key configured, etc.)."""
        return True

    def client(self, **kwargs) -> httpx.AsyncClient:
        """HTTP client bound to this feed's timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
            headers={"User-Agent": settings.USER_AGENT},
            follow_redirects=True,
            **kwargs,
        )

    async def get(self, url: str, **kwargs) -> Optional[httpx.Response]:
        """GET a URL, returning None on transport errors or non-200 responses."""
        try:
            async with self.client() as client:
                response = await client.get(url, **kwargs)
        except httpx.HTTPError as e:
            logger.debug(f"{self.name}: request failed: {error_handler.describe(e)}")
            return None

        if response.status_code != 200:
            logger.debug(f"{self.name}: HTTP {response.status_code} from {url}")
            return None

        return response

    def __repr__(self) -> str:
        """Object representation."""
        return f"<{self.__class__.__name__} name={self.name}>"
