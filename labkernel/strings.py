"""NUL-terminated string helpers."""

from __future__ import annotations

__all__ = ["compare_strings", "copy_limited"]


def _terminated(text: str) -> str:
    return text.split("\0", 1)[0]


def compare_strings(first: str, second: str) -> int:
    """Compare two strings up to their first NUL; return -1, 0 or 1."""
    for c1, c2 in zip(_terminated(first) + "\0", _terminated(second) + "\0"):
        if c1 != c2:
            return 1 if c1 > c2 else -1
        if c1 == "\0":
            break
    return 0


def copy_limited(src: str, limit: int) -> str:
    """Return the text of ``src`` before its NUL, at most ``limit`` characters.

    At least one character is copied from a non-empty string, even when
    ``limit`` is zero.
    """
    if limit < 0:
        raise ValueError("limit must not be negative")
    return _terminated(src)[: max(limit, 1)]