"""Result filtering and output."""

from s3checker.reports.formatter import format_bytes, format_result
from s3checker.reports.result_sink import (
    ConsoleDestination,
    Destination,
    FileDestination,
    FilterSpec,
    ResultSink,
)

__all__ = [
    "format_bytes",
    "format_result",
    "ConsoleDestination",
    "Destination",
    "FileDestination",
    "FilterSpec",
    "ResultSink",
]
