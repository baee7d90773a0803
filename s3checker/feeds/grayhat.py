"""GrayHatWarfare bucket search feed."""

from typing import Any, Optional, Set

import httpx
from loguru import logger

from s3checker.core.config import settings
from s3checker.feeds.base import BaseFeed


class GrayHatWarfareFeed(BaseFeed):
    """Keyword search against the GrayHatWarfare open bucket index.

    Needs a bearer token (``GHW_API_KEY``); without one the feed is skipped.
    """

    name = "grayhatwarfare"
    description = "GrayHatWarfare keyword search over indexed open buckets"
    requires_api_key = True

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key if api_key is not None else settings.GHW_API_KEY
        self.api_url = api_url or settings.GHW_API_URL

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, target: str) -> Set[str]:
        if not self.is_available():
            logger.debug(f"{self.name}: skipped (no API key)")
            return set()

        logger.info(f"Querying {self.name} for '{target}'")
        response = await self.get(
            self.api_url,
            params={"keywords": target},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        if response is None:
            return set()

        try:
            payload = response.json()
        except ValueError:
            logger.debug(f"{self.name}: malformed JSON payload")
            return set()

        buckets = extract_bucket_names(payload)
        logger.info(f"{self.name}: {len(buckets)} buckets for '{target}'")
        return buckets


def extract_bucket_names(payload: Any) -> Set[str]:
    """Collect every string ``bucket`` field in a JSON payload, at any depth."""
    found: Set[str] = set()
    stack = [payload]

    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            value = node.get("bucket")
            if isinstance(value, str) and value:
                found.add(value)
            stack.extend(v for v in node.values() if isinstance(v, (dict, list)))
        elif isinstance(node, list):
            stack.extend(node)

    return found
