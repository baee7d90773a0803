"""Existence and permission classification for candidate buckets."""

from typing import Optional

import httpx
from loguru import logger

from s3checker.core.config import settings
from s3checker.core.error_handler import error_handler
from s3checker.parsers.listing_parser import ListingParseError, parse_list_bucket_result
from s3checker.scanners.acl import NOT_READABLE, AclChecker, NoopAclChecker
from s3checker.scanners.base import EXISTS_STATUS_CODES, Permission, ProbeResult

REGION_HEADER = "x-amz-bucket-region"
LISTING_PARAMS = {"list-type": "2"}

# Characters that would move part of a name out of the host
URL_DELIMITERS = frozenset("/\\?#@:%")


def build_client(
    timeout: Optional[float] = None,
    max_connections: int = 100,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    HTTP client for probing.

    Redirects are not followed: a redirect is a status code to classify,
    not something to chase.
    """
    timeout = timeout if timeout is not None else settings.PROBE_TIMEOUT
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
        ),
        follow_redirects=False,
        headers={"User-Agent": settings.USER_AGENT},
        transport=transport,
    )


class ProbeClassifier:
    """Decides whether a candidate bucket exists and who can list it.

    Signals, in order:

    1. ``GET <url>``: existence. Transport failure means absent with no
       status code; otherwise the bucket exists iff the status is in
       EXISTS_STATUS_CODES. A name that does not map to exactly its own
       host (URL delimiters, unencodable labels) is absent without a request.
    2. ``GET <url>?list-type=2``: a parseable listing means PUBLIC. Skipped
       when the existence probe already returned 403.
    3. The ACL checker, only when the HTTP listing was inconclusive. A
       readable result means PUBLIC, anything else PRIVATE.
    4. ``HEAD <url>``: region header, default region when missing.

    No signal is retried and no network or parse error escapes classify().
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        acl_checker: Optional[AclChecker] = None,
        discover_region: bool = True,
        default_region: Optional[str] = None,
    ):
        self.client = client
        self.acl_checker = acl_checker or NoopAclChecker()
        self.discover_region = discover_region
        self.default_region = default_region or settings.DEFAULT_REGION

    async def classify(self, candidate: str) -> ProbeResult:
        """
        Probe one candidate.

        Args:
            candidate: Bucket name

        Returns:
            Immutable ProbeResult
        """
        url = self.endpoint(candidate)
        if url is None:
            logger.debug(f"{candidate!r}: not a valid bucket host name, treated as absent")
            return ProbeResult.absent(candidate)

        logger.debug(f"Checking {url}")

        try:
            response = await self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"{candidate}: existence probe failed: {error_handler.describe(e)}")
            return ProbeResult.absent(candidate)

        status_code = response.status_code
        if status_code not in EXISTS_STATUS_CODES:
            logger.debug(f"{candidate}: HTTP {status_code}, treated as absent")
            return ProbeResult.absent(candidate, status_code)

        permission, object_count, total_size = await self._classify_permission(
            candidate, url, status_code
        )
        region = await self.lookup_region(candidate, url) if self.discover_region else None

        logger.debug(f"{candidate}: HTTP {status_code}, {permission.value}")

        return ProbeResult(
            candidate=candidate,
            exists=True,
            status_code=status_code,
            permission=permission,
            region=region,
            object_count=object_count,
            total_size=total_size,
        )

    def endpoint(self, candidate: str) -> Optional[str]:
        """
        Virtual-hosted URL for a candidate, or None when the name cannot be
        the host label of exactly that bucket.
        """
        if not candidate or any(char in URL_DELIMITERS for char in candidate):
            return None

        url = settings.bucket_url(candidate)
        try:
            host = httpx.URL(url).host
        except httpx.InvalidURL:
            return None

        if host != f"{candidate}.{settings.STORAGE_DOMAIN}".lower():
            return None
        return url

    async def _classify_permission(self, candidate: str, url: str, status_code: int):
        if status_code != 403:
            stats = await self._list_anonymously(candidate, url)
            if stats is not None:
                return Permission.PUBLIC, stats.object_count, stats.total_size

        outcome = await self._check_acl(candidate)
        if outcome.readable:
            return Permission.PUBLIC, outcome.object_count, outcome.total_size

        return Permission.PRIVATE, None, None

    async def _list_anonymously(self, candidate: str, url: str):
        """HTTP listing; None when inconclusive."""
        try:
            response = await self.client.get(url, params=LISTING_PARAMS)
        except httpx.HTTPError as e:
            logger.debug(f"{candidate}: listing request failed: {error_handler.describe(e)}")
            return None

        if response.status_code != 200:
            logger.debug(f"{candidate}: listing returned HTTP {response.status_code}")
            return None

        try:
            return parse_list_bucket_result(response.text)
        except ListingParseError as e:
            logger.debug(f"{candidate}: listing body not parseable: {e}")
            return None

    async def _check_acl(self, candidate: str):
        if not self.acl_checker.is_available():
            return NOT_READABLE

        try:
            return await self.acl_checker.check(candidate)
        except Exception as e:
            logger.debug(
                f"{candidate}: {self.acl_checker.name} check failed: {error_handler.describe(e)}"
            )
            return NOT_READABLE

    async def lookup_region(self, candidate: str, url: Optional[str] = None) -> str:
        """Region from the HEAD response header, default region otherwise."""
        url = url or settings.bucket_url(candidate)
        try:
            response = await self.client.head(url)
        except httpx.HTTPError as e:
            logger.debug(f"{candidate}: region lookup failed: {error_handler.describe(e)}")
            return self.default_region

        return response.headers.get(REGION_HEADER) or self.default_region
