"""Parsers for bucket listing output."""

from s3checker.parsers.listing_parser import (
    ListingParseError,
    ListingStats,
    parse_cli_summary,
    parse_list_bucket_result,
)

__all__ = [
    "ListingParseError",
    "ListingStats",
    "parse_cli_summary",
    "parse_list_bucket_result",
]
