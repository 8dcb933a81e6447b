"""Shared matching helpers used by every validator."""

from __future__ import annotations

import re


def matches_pattern(candidate: str, pattern: str) -> bool:
    """Return True if *candidate* matches a rule pattern.

    Without a ``*`` the pattern is a plain substring.  With one, the other
    regex metacharacters are escaped, each ``*`` matches any sequence, and
    the expression is searched for anywhere in *candidate* (not anchored).
    """
    if "*" not in pattern:
        return pattern in candidate
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.search(regex, candidate) is not None


def line_number_at(content: str, offset: int) -> int:
    """Return the 1-based line number of character *offset* in *content*."""
    return content.count("\n", 0, offset) + 1


def count_lines(content: str) -> int:
    """Return the number of ``\\n``-terminated lines, counting an unterminated last line.

    Uses the same line breaks as :func:`line_number_at`, so other Unicode
    separators (form feed, ``U+2028``) never add lines.
    """
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)
