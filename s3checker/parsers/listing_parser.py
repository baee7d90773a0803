"""Parsers for anonymous bucket listings."""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

from loguru import logger

TOTAL_OBJECTS_RE = re.compile(r"Total Objects:\s*(\d+)")
TOTAL_SIZE_RE = re.compile(r"Total Size:\s*(\d+)")


class ListingParseError(ValueError):
    """Body is not a bucket listing."""


@dataclass(frozen=True)
class ListingStats:
    """Object count and summed size of one listing page."""

    object_count: int
    total_size: int


def _namespace(tag: str) -> str:
    # S3 XML uses namespace
    if tag.startswith("{"):
        return tag.split("}")[0] + "}"
    return ""


def parse_list_bucket_result(body: str) -> ListingStats:
    """
    Parse a ``ListBucketResult`` XML document.

    Only the returned page is counted; continuation tokens are not
    followed.

    Args:
        body: Response body of a ``?list-type=2`` request

    Returns:
        ListingStats with the number of ``Contents`` entries and the sum of
        their ``Size`` values

    Raises:
        ListingParseError: If the body is not a ListBucketResult document

    Example:
        >>> xml = "<ListBucketResult><Contents><Size>5</Size></Contents></ListBucketResult>"
        >>> parse_list_bucket_result(xml)
        ListingStats(object_count=1, total_size=5)
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise ListingParseError(f"Invalid XML: {e}") from e

    ns = _namespace(root.tag)
    if root.tag != f"{ns}ListBucketResult":
        raise ListingParseError(f"Unexpected root element: {root.tag}")

    object_count = 0
    total_size = 0
    for entry in root.iter(f"{ns}Contents"):
        object_count += 1
        size = entry.findtext(f"{ns}Size")
        if size is None:
            continue
        try:
            total_size += int(size.strip())
        except ValueError:
            logger.debug(f"Ignoring non-numeric object size: {size!r}")

    return ListingStats(object_count=object_count, total_size=total_size)


def parse_cli_summary(output: str) -> Optional[ListingStats]:
    """
    Read ``Total Objects`` / ``Total Size`` from ``aws s3 ls --summarize``.

    Returns None when the summary lines are missing.
    """
    objects = TOTAL_OBJECTS_RE.search(output)
    size = TOTAL_SIZE_RE.search(output)
    if not objects or not size:
        return None

    return ListingStats(object_count=int(objects.group(1)), total_size=int(size.group(1)))
