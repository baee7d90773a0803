"""osint.sh bucket search scraper."""

import re
from typing import Optional, Set

import httpx
from loguru import logger

from s3checker.core.config import settings
from s3checker.feeds.base import BaseFeed

BUCKET_HOST_RE = re.compile(r"([a-z0-9.\-]+)\.s3\.amazonaws\.com")


class OsintShFeed(BaseFeed):
    """Scrapes bucket hostnames out of the osint.sh bucket search page.

    The page is HTML meant for people, so parsing is best effort: anything
    that looks like ``<name>.s3.amazonaws.com`` is taken.
    """

    name = "osint.sh"
    description = "Scrape of the osint.sh public bucket search"

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.url = url or settings.OSINT_URL

    async def fetch(self, target: str) -> Set[str]:
        logger.info(f"Querying {self.name} for '{target}'")
        response = await self.get(self.url, params={"q": target})
        if response is None:
            return set()

        buckets = set(BUCKET_HOST_RE.findall(response.text))
        logger.info(f"{self.name}: {len(buckets)} buckets for '{target}'")
        return buckets
