"""
Main orchestrator for a bucket scan.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

import httpx
from loguru import logger

from s3checker.core.aggregator import SourceAggregator
from s3checker.core.config import settings
from s3checker.core.error_handler import EmptyCandidateSetError, ScanConfigurationError
from s3checker.core.generator import generate
from s3checker.core.scheduler import ScanProgress, ScanScheduler
from s3checker.core.wordlist import load_wordlist
from s3checker.feeds import BaseFeed, default_feeds
from s3checker.reports.result_sink import FilterSpec, ResultSink
from s3checker.scanners.acl import AclChecker, AwsCliAclChecker, NoopAclChecker
from s3checker.scanners.base import Permission, ProbeResult
from s3checker.scanners.bucket_prober import ProbeClassifier, build_client


@dataclass(frozen=True)
class ScanOptions:
    """Everything a single scan run needs to know."""

    target: str
    words: Optional[Tuple[str, ...]] = None
    wordlist_path: Optional[str] = None
    concurrency: int = settings.DEFAULT_CONCURRENCY
    rate_per_second: float = 0
    include_code: Optional[int] = None
    exclude_codes: FrozenSet[int] = field(default_factory=frozenset)
    acl_fallback: bool = False
    use_feeds: bool = True
    discover_region: bool = True
    probe_timeout: float = settings.PROBE_TIMEOUT

    @property
    def filter_spec(self) -> FilterSpec:
        return FilterSpec.build(self.include_code, self.exclude_codes)


@dataclass
class ScanSummary:
    """Totals for a finished scan."""

    target: str
    candidates: int = 0
    generated: int = 0
    feed_contributions: Dict[str, int] = field(default_factory=dict)
    scanned: int = 0
    existing: int = 0
    public: int = 0
    private: int = 0
    unreachable: int = 0
    emitted: int = 0
    duration: float = 0.0

    def record(self, result: ProbeResult) -> None:
        self.scanned += 1
        if result.transport_failed:
            self.unreachable += 1
        if not result.exists:
            return
        self.existing += 1
        if result.permission == Permission.PUBLIC:
            self.public += 1
        elif result.permission == Permission.PRIVATE:
            self.private += 1


class ScanOrchestrator:
    """
    Coordinates one scan:

    1. Load the wordlist and generate permutations
    2. Merge in feed candidates (the set is final after this)
    3. Probe every candidate under the scheduler
    4. Filter and write results through the sink
    """

    def __init__(
        self,
        options: ScanOptions,
        sink: Optional[ResultSink] = None,
        feeds: Optional[Sequence[BaseFeed]] = None,
        acl_checker: Optional[AclChecker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            options: Scan options
            sink: Result sink (a sink with no destinations when omitted)
            feeds: Feeds to query; every registered feed when omitted
            acl_checker: ACL fallback; derived from options.acl_fallback when omitted
            transport: Optional httpx transport for the probe client, used by tests
        """
        if not options.target or not options.target.strip():
            raise ScanConfigurationError("A target is required")

        self.options = options
        self.sink = sink or ResultSink()
        self.feeds: List[BaseFeed] = list(feeds) if feeds is not None else default_feeds()
        self.acl_checker = acl_checker or (
            AwsCliAclChecker() if options.acl_fallback else NoopAclChecker()
        )
        self.transport = transport
        self.aggregator = SourceAggregator()
        self.summary = ScanSummary(target=options.target)
        self.scheduler: Optional[ScanScheduler] = None

    async def prepare_candidates(self) -> Tuple[str, ...]:
        """
        Build the final candidate set.

        Raises:
            ScanConfigurationError: If the wordlist cannot be read
            EmptyCandidateSetError: If nothing is left to scan
        """
        options = self.options
        words = options.words if options.words is not None else load_wordlist(options.wordlist_path)

        generated = generate(options.target, words)
        self.summary.generated = len(generated)
        logger.info(f"Generated {len(generated)} candidates for '{options.target}'")

        feeds = self.feeds if options.use_feeds else []
        candidates = await self.aggregator.aggregate(options.target, generated, feeds)
        self.summary.feed_contributions = dict(self.aggregator.last_contributions)
        self.summary.candidates = len(candidates)

        if not candidates:
            raise EmptyCandidateSetError(f"No candidates to scan for '{options.target}'")

        return candidates

    async def scan(
        self,
        candidates: Sequence[str],
        progress_callback: Optional[Callable[[ProbeResult, ScanProgress], Any]] = None,
    ) -> ScanSummary:
        """
        Probe the candidates and push every result through the sink.

        Args:
            candidates: Output of prepare_candidates()
            progress_callback: Forwarded to the scheduler

        Returns:
            ScanSummary for the run
        """
        options = self.options
        filter_spec = options.filter_spec
        start = time.monotonic()

        if self.acl_checker.is_available():
            logger.info(f"ACL fallback enabled via {self.acl_checker.name}")

        async with build_client(
            timeout=options.probe_timeout,
            max_connections=options.concurrency,
            transport=self.transport,
        ) as client:
            classifier = ProbeClassifier(
                client,
                acl_checker=self.acl_checker,
                discover_region=options.discover_region,
            )
            self.scheduler = ScanScheduler(
                classifier,
                concurrency=options.concurrency,
                rate_per_second=options.rate_per_second,
                progress_callback=progress_callback,
            )

            async for result in self.scheduler.run(candidates):
                self.summary.record(result)
                self.sink.accept(result, filter_spec)

        self.summary.emitted = self.sink.emitted
        self.summary.duration = time.monotonic() - start

        logger.info(
            f"Scan of '{options.target}' finished: {self.summary.existing} buckets found, "
            f"{self.summary.public} public, {self.summary.emitted} reported"
        )

        return self.summary

    async def run(
        self,
        progress_callback: Optional[Callable[[ProbeResult, ScanProgress], Any]] = None,
    ) -> ScanSummary:
        """Prepare candidates and scan them."""
        candidates = await self.prepare_candidates()
        return await self.scan(candidates, progress_callback)
