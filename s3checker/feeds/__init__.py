"""Candidate intelligence feeds."""

from typing import Dict, List, Type

from s3checker.feeds.base import BaseFeed
from s3checker.feeds.grayhat import GrayHatWarfareFeed
from s3checker.feeds.osint import OsintShFeed

FEED_REGISTRY: Dict[str, Type[BaseFeed]] = {
    GrayHatWarfareFeed.name: GrayHatWarfareFeed,
    OsintShFeed.name: OsintShFeed,
}


def default_feeds() -> List[BaseFeed]:
    """Instantiate every registered feed with settings defaults."""
    return [feed_class() for feed_class in FEED_REGISTRY.values()]


__all__ = [
    "BaseFeed",
    "GrayHatWarfareFeed",
    "OsintShFeed",
    "FEED_REGISTRY",
    "default_feeds",
]
