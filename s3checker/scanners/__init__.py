"""Bucket probing."""

from s3checker.scanners.acl import AclChecker, AclOutcome, AwsCliAclChecker, NoopAclChecker
from s3checker.scanners.base import EXISTS_STATUS_CODES, Permission, ProbeResult
from s3checker.scanners.bucket_prober import ProbeClassifier, build_client

__all__ = [
    "AclChecker",
    "AclOutcome",
    "AwsCliAclChecker",
    "NoopAclChecker",
    "EXISTS_STATUS_CODES",
    "Permission",
    "ProbeResult",
    "ProbeClassifier",
    "build_client",
]
