"""Filtering and output of probe results."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, TextIO, Union

from loguru import logger
from rich.console import Console

from s3checker.core.error_handler import DestinationError
from s3checker.reports.formatter import format_result
from s3checker.scanners.base import Permission, ProbeResult

PERMISSION_STYLES = {
    Permission.PUBLIC: "bold red",
    Permission.PRIVATE: "yellow",
    Permission.UNKNOWN: "dim",
}


@dataclass(frozen=True)
class FilterSpec:
    """Status-code policy applied before a result is written."""

    include_code: Optional[int] = None
    exclude_codes: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls, include_code: Optional[int] = None, exclude_codes: Iterable[int] = ()
    ) -> "FilterSpec":
        return cls(include_code=include_code, exclude_codes=frozenset(exclude_codes))

    def accepts(self, result: ProbeResult) -> bool:
        if not result.exists:
            return False
        if self.include_code is not None and result.status_code != self.include_code:
            return False
        if result.status_code in self.exclude_codes:
            return False
        return True


class Destination(ABC):
    """Somewhere accepted result lines are written."""

    name: str = "destination"

    def __init__(self):
        self.failed = False

    @abstractmethod
    def write(self, line: str, result: ProbeResult) -> None:
        """Write one line; may raise OSError."""
        raise NotImplementedError("Subclass must implement write() method")

    def close(self) -> None:
        return None


class ConsoleDestination(Destination):
    """Prints lines through a rich console, coloured by permission."""

    name = "console"

    def __init__(self, console: Optional[Console] = None):
        super().__init__()
        self.console = console or Console()

    def write(self, line: str, result: ProbeResult) -> None:
        self.console.print(
            line,
            style=PERMISSION_STYLES.get(result.permission),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


class FileDestination(Destination):
    """Appends lines to a file created when the destination is opened."""

    name = "file"

    def __init__(self, path: Union[str, Path], append: bool = False):
        """
        Create or open the output file.

        Raises:
            DestinationError: If the file cannot be created
        """
        super().__init__()
        self.path = Path(path)
        try:
            self._handle: Optional[TextIO] = open(
                self.path, "a" if append else "w", encoding="utf-8"
            )
        except OSError as e:
            raise DestinationError(f"Cannot create output file {self.path}: {e}") from e

    def write(self, line: str, result: ProbeResult) -> None:
        if self._handle is None:
            raise OSError(f"{self.path} is closed")
        self._handle.write(line + "\n")
        self._handle.flush()

    def close(self) -> None:
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError as e:
                logger.warning(f"Error closing {self.path}: {e}")
            self._handle = None


class ResultSink:
    """Applies a FilterSpec and writes accepted results to every destination.

    Writes are serialized by a lock so lines never interleave. A destination
    that fails is reported once and skipped for the rest of the run; the
    scan itself is never aborted by an output error.
    """

    def __init__(self, destinations: Iterable[Destination] = ()):
        self.destinations: List[Destination] = list(destinations)
        self.emitted = 0
        self._lock = threading.Lock()

    def accept(self, result: ProbeResult, filter_spec: FilterSpec) -> Optional[str]:
        """
        Emit a result if the filter lets it through.

        Args:
            result: Probe result
            filter_spec: Status-code filter

        Returns:
            The formatted line, or None when suppressed
        """
        if not filter_spec.accepts(result):
            return None

        line = format_result(result)

        with self._lock:
            for destination in self.destinations:
                if destination.failed:
                    continue
                try:
                    destination.write(line, result)
                except OSError as e:
                    destination.failed = True
                    logger.warning(
                        f"Output to {destination.name} failed, skipping it from now on: {e}"
                    )
            self.emitted += 1

        return line

    def close(self) -> None:
        with self._lock:
            for destination in self.destinations:
                destination.close()
