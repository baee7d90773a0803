"""Result line formatting."""

from s3checker.scanners.base import ProbeResult

SEPARATOR = " | "


def format_bytes(bytes_size: float) -> str:
    """Format bytes to human-readable size.

    Args:
        bytes_size: Size in bytes.

    Returns:
        Formatted size string (e.g., "1.5 MB").
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes_size < 1024.0:
            return f"{bytes_size:.1f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.1f} PB"


def format_result(result: ProbeResult) -> str:
    """
    Render a result as ``<url> | <status> | <permission>``.

    Region and object statistics are appended when known.

    Example:
        >>> format_result(ProbeResult("acme", True, 403, Permission.PRIVATE))
        'http://acme.s3.amazonaws.com | 403 | PRIVATE'
    """
    status = "none" if result.status_code is None else str(result.status_code)
    parts = [result.url, status, result.permission.value]

    if result.region:
        parts.append(result.region)

    if result.object_count is not None:
        noun = "object" if result.object_count == 1 else "objects"
        parts.append(f"{result.object_count} {noun}")
        if result.total_size is not None:
            parts.append(format_bytes(result.total_size))

    return SEPARATOR.join(parts)
