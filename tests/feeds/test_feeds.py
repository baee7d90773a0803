"""Unit tests for intelligence feeds."""

import httpx
import pytest

from s3checker.feeds import FEED_REGISTRY, GrayHatWarfareFeed, OsintShFeed, default_feeds
from s3checker.feeds.grayhat import extract_bucket_names

GHW_PAYLOAD = {
    "files": [
        {"bucket": "acme-assets", "filename": "logo.png"},
        {"bucket": "acme-backup", "filename": "db.sql"},
        {"bucket": "acme-assets", "filename": "style.css"},
    ],
    "meta": {"results": 3, "nested": [{"bucket": "acme-legacy"}]},
}

OSINT_PAGE = """
<html><body>
<table>
<tr><td><a href="http://acme-media.s3.amazonaws.com/">acme-media.s3.amazonaws.com</a></td></tr>
<tr><td>acme.backups.s3.amazonaws.com</td></tr>
<tr><td>https://www.example.com/</td></tr>
</table>
</body></html>
"""


class Recorder:
    """MockTransport handler that records requests."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error(f"failed: {request.url}", request=request)
        return self.response

    def transport(self):
        return httpx.MockTransport(self)


def test_registry():
    """Test the registered feeds."""
    assert set(FEED_REGISTRY) == {"grayhatwarfare", "osint.sh"}
    assert [type(feed) for feed in default_feeds()] == [GrayHatWarfareFeed, OsintShFeed]


def test_extract_bucket_names():
    """Test bucket field extraction at any depth."""
    assert extract_bucket_names(GHW_PAYLOAD) == {"acme-assets", "acme-backup", "acme-legacy"}
    assert extract_bucket_names({"bucket": 42, "other": "x"}) == set()
    assert extract_bucket_names([]) == set()


@pytest.mark.asyncio
async def test_grayhat_fetch():
    """Test the search request and payload parsing."""
    recorder = Recorder(httpx.Response(200, json=GHW_PAYLOAD))
    feed = GrayHatWarfareFeed(api_key="secret", transport=recorder.transport())

    buckets = await feed.fetch("acme")

    assert buckets == {"acme-assets", "acme-backup", "acme-legacy"}
    request = recorder.requests[0]
    assert request.url.params["keywords"] == "acme"
    assert request.headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_grayhat_without_key_makes_no_request():
    """Test the feed is skipped without credentials."""
    recorder = Recorder(httpx.Response(200, json=GHW_PAYLOAD))
    feed = GrayHatWarfareFeed(api_key="", transport=recorder.transport())

    assert feed.is_available() is False
    assert await feed.fetch("acme") == set()
    assert recorder.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "recorder",
    [
        Recorder(httpx.Response(401, json={"error": "unauthorized"})),
        Recorder(httpx.Response(200, text="<html>maintenance</html>")),
        Recorder(error=httpx.ConnectError),
        Recorder(error=httpx.ReadTimeout),
    ],
)
async def test_grayhat_failures_give_empty_set(recorder):
    """Test non-200, malformed payloads and transport errors."""
    feed = GrayHatWarfareFeed(api_key="secret", transport=recorder.transport())

    assert await feed.fetch("acme") == set()


@pytest.mark.asyncio
async def test_osint_fetch():
    """Test hostname scraping."""
    recorder = Recorder(httpx.Response(200, text=OSINT_PAGE))
    feed = OsintShFeed(transport=recorder.transport())

    buckets = await feed.fetch("acme")

    assert buckets == {"acme-media", "acme.backups"}
    assert recorder.requests[0].url.params["q"] == "acme"


@pytest.mark.asyncio
async def test_osint_page_without_buckets():
    """Test a page with nothing to scrape."""
    recorder = Recorder(httpx.Response(200, text="<html>no results</html>"))
    feed = OsintShFeed(transport=recorder.transport())

    assert await feed.fetch("acme") == set()


@pytest.mark.asyncio
async def test_osint_failures_give_empty_set():
    """Test server errors and transport errors."""
    for recorder in (Recorder(httpx.Response(503)), Recorder(error=httpx.ConnectError)):
        feed = OsintShFeed(transport=recorder.transport())
        assert await feed.fetch("acme") == set()
