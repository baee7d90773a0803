"""Merges generated candidates with intelligence feed results."""

import asyncio
from typing import Dict, Iterable, Sequence, Set, Tuple

from loguru import logger

from s3checker.core.error_handler import error_handler
from s3checker.feeds.base import BaseFeed


class SourceAggregator:
    """Union of permutation candidates and feed candidates.

    Deduplication is by exact string equality. Generated candidates keep
    their order and come first; feed candidates follow in feed order, each
    feed's names sorted so the result is reproducible.
    """

    def __init__(self):
        self.last_contributions: Dict[str, int] = {}

    async def aggregate(
        self,
        target: str,
        generated: Iterable[str],
        feeds: Sequence[BaseFeed] = (),
    ) -> Tuple[str, ...]:
        """
        Build the final candidate set for a scan.

        Args:
            target: Keyword passed to every feed
            generated: Output of the candidate generator
            feeds: Feeds to query; all run concurrently

        Returns:
            Tuple of unique candidates

        Example:
            >>> aggregator = SourceAggregator()
            >>> asyncio.run(aggregator.aggregate("acme", ["acme", "acme-dev"]))
            ('acme', 'acme-dev')
        """
        candidates: Dict[str, None] = dict.fromkeys(generated)
        generated_count = len(candidates)
        self.last_contributions = {}

        if feeds:
            logger.info(f"Querying {len(feeds)} feeds for '{target}'")
            feed_results = await asyncio.gather(
                *(self._fetch(feed, target) for feed in feeds)
            )

            for feed, names in zip(feeds, feed_results):
                before = len(candidates)
                for name in sorted(names):
                    candidates[name] = None
                self.last_contributions[feed.name] = len(candidates) - before

        logger.info(
            f"Aggregated {len(candidates)} candidates: {generated_count} generated, "
            f"{len(candidates) - generated_count} new from feeds"
        )

        return tuple(candidates)

    async def _fetch(self, feed: BaseFeed, target: str) -> Set[str]:
        """Run one feed, treating any failure as an empty result."""
        try:
            names = await feed.fetch(target)
        except Exception as e:
            logger.debug(f"Feed {feed.name} failed: {error_handler.describe(e)}")
            return set()

        return {name for name in names if isinstance(name, str) and name}
