"""CLI helpers for the scan summary and option parsing."""

from typing import Optional


def format_duration(seconds: float) -> str:
    """Format a scan duration.

    Short scans keep one decimal ("0.4s", "12.5s"); anything a minute or
    longer is shown as hours, minutes and whole seconds ("1h 2m 5s").
    """
    if seconds <= 0:
        return "0.0s"
    if seconds < 60:
        return f"{seconds:.1f}s"

    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")

    return " ".join(parts)


def format_rate(count: int, seconds: float) -> str:
    """Probes per second, e.g. ``"42.0/s"``."""
    if seconds <= 0:
        return "-"
    return f"{count / seconds:.1f}/s"


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    """Return ``singular`` when count is 1, ``plural`` (or singular + "s") otherwise."""
    return singular if count == 1 else (plural or singular + "s")


def parse_status_codes(values) -> frozenset:
    """Turn repeated/comma-separated status code options into a set of ints.

    Args:
        values: Iterable of strings such as ``"403"`` or ``"400,403"``.

    Returns:
        Frozenset of integer status codes.

    Raises:
        ValueError: If a value is not an integer.
    """
    codes = set()
    for value in values or ():
        for part in str(value).split(","):
            part = part.strip()
            if part:
                codes.add(int(part))
    return frozenset(codes)
