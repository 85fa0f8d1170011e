"""
Result-limit policy shared by every read path.

A non-positive limit means "no limit".
"""

from typing import Optional, Union

from src.utils.errors import MalformedInputError


def parse_limit(raw: Optional[Union[str, int]]) -> int:
    """
    Convert a caller-supplied limit into an int.

    Args:
        raw: Limit as received from a URL parameter or CLI flag

    Returns:
        The integer limit (0 when nothing was supplied)

    Raises:
        MalformedInputError: If the value is not an integer
    """
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise MalformedInputError(f"Invalid limit: {raw!r}")
    if isinstance(raw, int):
        return raw

    text = str(raw).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise MalformedInputError(f"Invalid limit: {raw!r}. Must be an integer") from None


def apply_limit(cursor, limit: int):
    """Truncate a cursor to ``limit`` results, leaving it untouched when limit <= 0."""
    if limit > 0:
        return cursor.limit(limit)
    return cursor
