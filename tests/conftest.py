"""Shared fixtures."""

from typing import Dict, List, Optional

import httpx
import pytest
from loguru import logger

from s3checker.core.config import settings

LISTING_XML = """<?xml version="1.0" encoding="UTF-8"?>
<ListBucketResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/">
  <Name>acme-data</Name>
  <KeyCount>3</KeyCount>
  <MaxKeys>1000</MaxKeys>
  <IsTruncated>false</IsTruncated>
  <Contents><Key>backup.sql</Key><Size>1024</Size></Contents>
  <Contents><Key>logo.png</Key><Size>2048</Size></Contents>
  <Contents><Key>empty.txt</Key><Size>0</Size></Contents>
</ListBucketResult>
"""

NO_SUCH_BUCKET = """<?xml version="1.0" encoding="UTF-8"?>
<Error><Code>NoSuchBucket</Code><Message>The specified bucket does not exist</Message></Error>
"""

ACCESS_DENIED = """<?xml version="1.0" encoding="UTF-8"?>
<Error><Code>AccessDenied</Code><Message>Access Denied</Message></Error>
"""


class FakeS3:
    """In-memory stand-in for S3 virtual-hosted endpoints.

    ``buckets`` maps a bucket name to a dict with:
        status: status of plain GET/HEAD (default 200)
        listing_status: status of ``?list-type=2`` (default: status)
        listing: listing body (default LISTING_XML for 200, ACCESS_DENIED otherwise)
        region: value of the region header (omitted when None)
    Names not in ``buckets`` answer 404; names in ``unreachable`` raise a
    connection error; ``head_fails`` makes every HEAD raise.
    """

    def __init__(self):
        self.buckets: Dict[str, dict] = {}
        self.unreachable = set()
        self.head_fails = False
        self.requests: List[httpx.Request] = []

    def add(self, name: str, status: int = 200, region: Optional[str] = "us-east-1", **extra):
        self.buckets[name] = {"status": status, "region": region, **extra}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        name = request.url.host.removesuffix("." + settings.STORAGE_DOMAIN)

        if name in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method == "HEAD" and self.head_fails:
            raise httpx.ConnectTimeout("timed out", request=request)

        bucket = self.buckets.get(name)
        if bucket is None:
            return httpx.Response(404, text=NO_SUCH_BUCKET)

        headers = {}
        if bucket.get("region"):
            headers["x-amz-bucket-region"] = bucket["region"]

        if request.method == "HEAD":
            return httpx.Response(bucket["status"], headers=headers)

        if "list-type" in request.url.params:
            status = bucket.get("listing_status", bucket["status"])
            default_body = LISTING_XML if status == 200 else ACCESS_DENIED
            return httpx.Response(status, headers=headers, text=bucket.get("listing", default_body))

        body = ACCESS_DENIED if bucket["status"] == 403 else ""
        return httpx.Response(bucket["status"], headers=headers, text=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requested(self, name: str, method: str = "GET", listing: Optional[bool] = None) -> int:
        """Count requests for one bucket."""
        count = 0
        for request in self.requests:
            if not request.url.host.startswith(name + "."):
                continue
            if request.method != method:
                continue
            if listing is not None and ("list-type" in request.url.params) != listing:
                continue
            count += 1
        return count


@pytest.fixture
def fake_s3():
    """Fake S3 endpoint."""
    return FakeS3()


@pytest.fixture
def listing_xml():
    """A three-object ListBucketResult document."""
    return LISTING_XML


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added during a test (they may point at closed streams)."""
    yield
    logger.remove()
