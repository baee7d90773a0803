"""Error taxonomy and categorization for bucket scans."""

import asyncio
import json
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Tuple, Type

import httpx
from loguru import logger


class S3CheckerError(Exception):
    """Base class for errors raised by s3-checker."""


class ScanConfigurationError(S3CheckerError):
    """Invalid scan configuration, raised before any probe is sent."""


class EmptyCandidateSetError(ScanConfigurationError):
    """No candidates left to scan after generation and aggregation."""


class DestinationError(S3CheckerError):
    """An output destination could not be created."""


class ErrorCategory(str, Enum):
    """Error category enumeration."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    PARSE = "parse"
    DESTINATION = "destination"
    CONFIGURATION = "configuration"
    TOOL = "tool"
    UNKNOWN = "unknown"


# Checked in order, so subclasses come before their bases
ERROR_CATEGORIES: Tuple[Tuple[Type[BaseException], ErrorCategory], ...] = (
    (ScanConfigurationError, ErrorCategory.CONFIGURATION),
    (DestinationError, ErrorCategory.DESTINATION),
    (httpx.TimeoutException, ErrorCategory.TIMEOUT),
    (asyncio.TimeoutError, ErrorCategory.TIMEOUT),
    (TimeoutError, ErrorCategory.TIMEOUT),
    (httpx.TransportError, ErrorCategory.TRANSPORT),
    (ConnectionError, ErrorCategory.TRANSPORT),
    (ET.ParseError, ErrorCategory.PARSE),
    (json.JSONDecodeError, ErrorCategory.PARSE),
    (httpx.DecodingError, ErrorCategory.PARSE),
    (FileNotFoundError, ErrorCategory.TOOL),
    (OSError, ErrorCategory.DESTINATION),
)

# Categories that abort a run before scanning starts
FATAL_CATEGORIES = frozenset({ErrorCategory.CONFIGURATION})


class ErrorHandler:
    """Maps exceptions to categories and renders them for logs.

    Transport, timeout, parse and tool errors never stop a scan: callers
    turn them into negative signals and only use this class to describe
    what happened.
    """

    def categorize_error(self, error: BaseException) -> ErrorCategory:
        """
        Categorize an error.

        Args:
            error: Exception to categorize

        Returns:
            Error category

        Example:
            >>> handler = ErrorHandler()
            >>> handler.categorize_error(httpx.ConnectError("refused"))
            <ErrorCategory.TRANSPORT: 'transport'>
        """
        for error_type, category in ERROR_CATEGORIES:
            if isinstance(error, error_type):
                return category

        # Check error message for hints
        error_message = str(error).lower()

        if any(keyword in error_message for keyword in ["timed out", "timeout"]):
            return ErrorCategory.TIMEOUT

        if any(
            keyword in error_message
            for keyword in ["connection", "network", "dns", "ssl"]
        ):
            return ErrorCategory.TRANSPORT

        if any(
            keyword in error_message
            for keyword in ["command not found", "executable"]
        ):
            return ErrorCategory.TOOL

        logger.debug(f"Categorized {type(error).__name__} as unknown")
        return ErrorCategory.UNKNOWN

    def is_fatal(self, category: ErrorCategory) -> bool:
        """Check whether an error category aborts the run."""
        return category in FATAL_CATEGORIES

    def describe(self, error: BaseException) -> str:
        """
        Render an error as ``category: Type: message``.

        Example:
            >>> ErrorHandler().describe(ValueError("bad"))
            'unknown: ValueError: bad'
        """
        category = self.categorize_error(error)
        message = str(error) or repr(error)
        return f"{category.value}: {type(error).__name__}: {message}"


error_handler = ErrorHandler()
