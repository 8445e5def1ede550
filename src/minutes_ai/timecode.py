"""Loose time-expression normalization.

Human-written timestamps in chat logs come in many shapes: ``5:30``,
``1:05:30``, ``01 : 02 : 03.4``.  Every parser funnels them through
:func:`format_timecode`, which produces the canonical fixed-width
``HH:MM:SS.mmm`` string used across the project.

The number of numeric groups decides which fields they fill: two groups
are minute:second, three groups are hour:minute:second.
"""

from __future__ import annotations

import re

# ASCII digits only; full-width digits are not time components.
_DIGIT = "[0-9]"

CANONICAL_LENGTH = 12


def timecode_pattern(name: str) -> str:
    """Return the regex fragment for one loose timestamp.

    The fragment defines four named groups, ``<name>_a``, ``<name>_b``,
    ``<name>_c`` and ``<name>_ms``; the last two are optional.  Whitespace
    is allowed around ``:`` and ``.``.

    Args:
        name: Prefix for the group names, so several timestamps can be
            composed into a single pattern.

    Returns:
        A regex source string (not compiled, not anchored).
    """
    return (
        rf"(?P<{name}_a>{_DIGIT}{{1,2}})\s*:\s*(?P<{name}_b>{_DIGIT}{{1,2}})"
        rf"(?:\s*:\s*(?P<{name}_c>{_DIGIT}{{1,2}}))?"
        rf"(?:\s*\.\s*(?P<{name}_ms>{_DIGIT}{{1,3}}))?"
    )


_TIMECODE_RE = re.compile(timecode_pattern("t"))


def format_timecode(
    first: str,
    second: str,
    third: str | None = None,
    millis: str | None = None,
) -> str:
    """Build a canonical ``HH:MM:SS.mmm`` string from captured groups.

    Args:
        first: First numeric group.
        second: Second numeric group.
        third: Third numeric group, if present.  Its presence shifts the
            groups to hour:minute:second; otherwise the first two groups
            are minute:second and the hour is ``00``.
        millis: Fractional digits, right-padded to three places.  ``None``
            means ``000``.

    Returns:
        The 12-character canonical time string.
    """
    if third is not None:
        hours, minutes, seconds = first, second, third
    else:
        hours, minutes, seconds = "00", first, second

    ms = millis.ljust(3, "0") if millis else "000"
    return f"{hours.zfill(2)}:{minutes.zfill(2)}:{seconds.zfill(2)}.{ms}"


def format_match(match: re.Match[str], name: str) -> str:
    """Format the timestamp captured under *name* in *match*.

    Args:
        match: A match against a pattern built with :func:`timecode_pattern`.
        name: The group-name prefix passed to :func:`timecode_pattern`.

    Returns:
        The canonical time string.
    """
    return format_timecode(
        match.group(f"{name}_a"),
        match.group(f"{name}_b"),
        match.group(f"{name}_c"),
        match.group(f"{name}_ms"),
    )


def normalize_timecode(text: str) -> str:
    """Normalize a whole string holding one loose timestamp.

    >>> normalize_timecode("5:30")
    '00:05:30.000'
    >>> normalize_timecode("1:2:3.4")
    '01:02:03.400'

    Args:
        text: Candidate time expression.  Surrounding whitespace is ignored.

    Returns:
        The canonical time string, or ``""`` when *text* is not a time
        expression.
    """
    match = _TIMECODE_RE.fullmatch(text.strip())
    if match is None:
        return ""
    return format_match(match, "t")
