"""Unit tests for the source aggregator."""

from typing import Set

import pytest

from s3checker.core.aggregator import SourceAggregator
from s3checker.core.generator import generate
from s3checker.feeds.base import BaseFeed


class StaticFeed(BaseFeed):
    """Feed returning a fixed set of names."""

    def __init__(self, name, names):
        super().__init__(timeout=1)
        self.name = name
        self.names = set(names)
        self.calls = []

    async def fetch(self, target: str) -> Set[str]:
        self.calls.append(target)
        return set(self.names)


class BrokenFeed(BaseFeed):
    """Feed that violates its contract and raises."""

    name = "broken"

    async def fetch(self, target: str) -> Set[str]:
        raise RuntimeError("feed exploded")


@pytest.fixture
def aggregator():
    """Create aggregator instance."""
    return SourceAggregator()


@pytest.mark.asyncio
async def test_no_feeds_returns_generated(aggregator):
    """Test aggregation without feeds."""
    generated = generate("acme", ["data"])

    result = await aggregator.aggregate("acme", generated, [])

    assert result == generated
    assert aggregator.last_contributions == {}


@pytest.mark.asyncio
async def test_union_of_generated_and_feeds(aggregator):
    """Test the result equals the union of every source."""
    generated = generate("acme", ["data"])
    feed_a = StaticFeed("a", {"acme-assets", "acme", "acme-data-dev"})
    feed_b = StaticFeed("b", {"acme-assets", "acme-logs"})

    result = await aggregator.aggregate("acme", generated, [feed_a, feed_b])

    assert set(result) == set(generated) | feed_a.names | feed_b.names
    assert set(result) >= set(generated)
    assert len(result) == len(set(result))
    assert feed_a.calls == ["acme"]
    assert feed_b.calls == ["acme"]


@pytest.mark.asyncio
async def test_generated_order_is_kept(aggregator):
    """Test generated candidates come first in their original order."""
    generated = ("acme", "acme-dev", "acme-prod")
    feed = StaticFeed("feed", {"zeta", "alpha"})

    result = await aggregator.aggregate("acme", generated, [feed])

    assert result == ("acme", "acme-dev", "acme-prod", "alpha", "zeta")


@pytest.mark.asyncio
async def test_exact_string_dedup(aggregator):
    """Test that case variants from feeds are kept as distinct candidates."""
    feed = StaticFeed("feed", {"ACME", "acme"})

    result = await aggregator.aggregate("acme", ("acme",), [feed])

    assert sorted(result) == ["ACME", "acme"]


@pytest.mark.asyncio
async def test_failing_feed_is_ignored(aggregator):
    """Test a raising feed counts as an empty result."""
    good = StaticFeed("good", {"acme-backup"})

    result = await aggregator.aggregate("acme", ("acme",), [BrokenFeed(), good])

    assert result == ("acme", "acme-backup")
    assert aggregator.last_contributions == {"broken": 0, "good": 1}


@pytest.mark.asyncio
async def test_contributions_count_only_new_names(aggregator):
    """Test per-feed contribution counts."""
    feed_a = StaticFeed("a", {"acme", "acme-x"})
    feed_b = StaticFeed("b", {"acme-x", "acme-y"})

    await aggregator.aggregate("acme", ("acme",), [feed_a, feed_b])

    assert aggregator.last_contributions == {"a": 1, "b": 1}


@pytest.mark.asyncio
async def test_empty_names_are_dropped(aggregator):
    """Test that empty strings from feeds never become candidates."""
    feed = StaticFeed("feed", {"", "acme-ok"})

    result = await aggregator.aggregate("acme", ("acme",), [feed])

    assert result == ("acme", "acme-ok")
