"""Formatting helpers for console reports"""

from typing import Union

SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(size_bytes: Union[int, float]) -> str:
    """Format a byte count for display

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1536)
        '1.5 KB'
    """
    size = float(size_bytes)
    for unit in SIZE_UNITS[:-1]:
        if size < 1024:
            break
        size /= 1024
    else:
        unit = SIZE_UNITS[-1]

    if unit == "B":
        return f"{int(size)} B"
    return f"{size:.1f} {unit}"


def format_duration(seconds: float) -> str:
    """Format an elapsed time such as a deployment's duration"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}m {rest:02d}s"


def format_path(path: str, max_length: int = 50) -> str:
    """Shorten a manifest path for a table cell

    The file name is kept whole; leading directories are elided first.

    Args:
        path: Root-relative manifest path
        max_length: Longest string returned for paths that can be shortened

    Returns:
        The path, or ``.../`` followed by its tail
    """
    if len(path) <= max_length:
        return path

    tail = path[-(max_length - 4):]
    if "/" in tail:
        tail = tail[tail.index("/") + 1:]
    return f".../{tail}"
