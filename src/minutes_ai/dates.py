"""Meeting-date guessing from transcript file names.

Transcript exports are usually named after the meeting, often with a
date somewhere in the name.  :func:`extract_date` runs an ordered cascade
of patterns against the name; the first pattern that matches anywhere in
the string wins.  Full dates come before year-less ones, and year-less
ones borrow the current year.

Nothing is validated: ``20241399`` happily becomes ``2024-13-99``, and a
six-digit run is always read as ``YYMMDD`` in the 2000s.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

logger = logging.getLogger(__name__)

_Resolver = Callable[[re.Match[str], date], str]


@dataclass(frozen=True)
class DatePattern:
    """One step of the date cascade.

    Attributes:
        name: Short label used in logs and diagnostics.
        regex: Compiled pattern, applied with ``re.search``.
        resolve: Turns a match (plus today's date, for year-less patterns)
            into a ``YYYY-MM-DD`` string.
    """

    name: str
    regex: re.Pattern[str]
    resolve: _Resolver


def _full_date(match: re.Match[str], today: date) -> str:  # noqa: ARG001
    year, month, day = match.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def _short_year(match: re.Match[str], today: date) -> str:  # noqa: ARG001
    year, month, day = match.groups()
    return f"20{year}-{month}-{day}"


def _current_year(match: re.Match[str], today: date) -> str:
    month, day = match.groups()
    return f"{today.year}-{month.zfill(2)}-{day.zfill(2)}"


#: The cascade, most specific first.  The first step that matches wins.
DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern(
        "YYYY-MM-DD",
        re.compile(r"([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})"),
        _full_date,
    ),
    DatePattern(
        "YYYY_MM_DD",
        re.compile(r"([0-9]{4})_([0-9]{1,2})_([0-9]{1,2})"),
        _full_date,
    ),
    DatePattern(
        "YYYY.MM.DD",
        re.compile(r"([0-9]{4})\.([0-9]{1,2})\.([0-9]{1,2})"),
        _full_date,
    ),
    DatePattern(
        "YYYYMMDD",
        re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})"),
        _full_date,
    ),
    DatePattern(
        "YYYY年M月D日",
        re.compile(r"([0-9]{4})年([0-9]{1,2})月([0-9]{1,2})日"),
        _full_date,
    ),
    DatePattern(
        "YYMMDD",
        re.compile(r"([0-9]{2})([0-9]{2})([0-9]{2})"),
        _short_year,
    ),
    DatePattern("MM-DD", re.compile(r"([0-9]{1,2})-([0-9]{1,2})"), _current_year),
    DatePattern("MM_DD", re.compile(r"([0-9]{1,2})_([0-9]{1,2})"), _current_year),
    DatePattern("MM.DD", re.compile(r"([0-9]{1,2})\.([0-9]{1,2})"), _current_year),
    DatePattern("M月D日", re.compile(r"([0-9]{1,2})月([0-9]{1,2})日"), _current_year),
)


def match_date_pattern(filename: str) -> tuple[DatePattern, re.Match[str]] | None:
    """Return the first cascade step that matches *filename*, with its match.

    Args:
        filename: File name (or any string) to search.

    Returns:
        ``(pattern, match)`` for the winning step, or ``None``.
    """
    for pattern in DATE_PATTERNS:
        match = pattern.regex.search(filename)
        if match is not None:
            return pattern, match
    return None


def extract_date(filename: str, today: date | None = None) -> str | None:
    """Guess a ``YYYY-MM-DD`` meeting date from a file name.

    Args:
        filename: File name to inspect, usually without its extension.
        today: Date whose year fills in year-less patterns.  Defaults to
            :meth:`datetime.date.today`.

    Returns:
        The canonical date string, or ``None`` if no pattern matches.
    """
    found = match_date_pattern(filename)
    if found is None:
        logger.debug("No date pattern matched %r", filename)
        return None

    pattern, match = found
    result = pattern.resolve(match, today or date.today())
    logger.debug("Date pattern %s matched %r -> %s", pattern.name, filename, result)
    return result
