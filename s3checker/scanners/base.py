"""Result types shared by bucket probes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from s3checker.core.config import settings

# Narrow existence policy: anything else, including redirects, is "absent"
EXISTS_STATUS_CODES = frozenset({200, 403})


class Permission(str, Enum):
    """Anonymous access level of a bucket."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing one candidate bucket name."""

    candidate: str
    exists: bool
    status_code: Optional[int] = None
    permission: Permission = Permission.UNKNOWN
    region: Optional[str] = None
    object_count: Optional[int] = None
    total_size: Optional[int] = None

    @property
    def url(self) -> str:
        return settings.bucket_url(self.candidate)

    @property
    def transport_failed(self) -> bool:
        return self.status_code is None

    @classmethod
    def absent(cls, candidate: str, status_code: Optional[int] = None) -> "ProbeResult":
        """Result for a candidate that does not exist or could not be reached."""
        return cls(candidate=candidate, exists=False, status_code=status_code)
