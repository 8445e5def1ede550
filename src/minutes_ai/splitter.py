"""Speaker and time separation for one line of free-form transcript text.

Chat-log exports put a speaker label at the start of each turn, optionally
followed by a timestamp or a time range::

    田中 5:30 こんにちは
    田中：おはよう
    Alice 00:01:02 - 00:01:09 Let's get started.

:func:`split_line` peels off the label, then the time expression, and
returns what is left as the utterance text.  All of this is purely
syntactic: names are not validated and time ranges are not checked for
ordering.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from minutes_ai.timecode import format_match, timecode_pattern

# Speaker rules, tried in order.  The first handles "Name  5:30 ..." where
# no separator other than whitespace precedes the time; the second handles
# "Name: ...", "Name：..." and "Name ...".
_SPEAKER_RULES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(?P<label>.+?)\s+[0-9]{1,2}\s*:\s*[0-9]{1,2}"),
    re.compile(r"^(?P<label>.+?)[\s:：]+"),
)

_LEADING_SEPARATORS_RE = re.compile(r"^[\s:：]+")

# Range separators: hyphen, tilde, full-width wave dash, any whitespace
# (``\s`` covers the ideographic space).
_TIME_RANGE_RE = re.compile(
    "^" + timecode_pattern("start") + r"[\-~〜\s]+" + timecode_pattern("end")
)
_SINGLE_TIME_RE = re.compile("^" + timecode_pattern("start"))


@dataclass(frozen=True)
class SplitLine:
    """Result of splitting one attributed line.

    Attributes:
        speaker: The speaker label, trimmed.
        start_time: Canonical start time, or ``""``.
        end_time: Canonical end time, or ``""``; only set for ranges.
        text: The remaining utterance text, trimmed.
    """

    speaker: str
    start_time: str
    end_time: str
    text: str


def _match_speaker(line: str) -> tuple[str, str] | None:
    """Return ``(speaker, remainder)`` for the first matching speaker rule."""
    for rule in _SPEAKER_RULES:
        match = rule.match(line)
        if match is None:
            continue

        speaker = match.group("label").strip().rstrip(":：").rstrip()
        if not speaker:
            return None

        remainder = line[match.end("label"):]
        return speaker, _LEADING_SEPARATORS_RE.sub("", remainder)

    return None


def split_times(content: str) -> tuple[str, str, str]:
    """Extract a leading time range or single timestamp from *content*.

    Args:
        content: Utterance content with the speaker label removed.

    Returns:
        ``(start_time, end_time, text)``.  Times are canonical strings or
        ``""``; *text* is *content* with the time expression removed from
        the front and trimmed.
    """
    match = _TIME_RANGE_RE.match(content)
    if match is not None:
        start = format_match(match, "start")
        end = format_match(match, "end")
        return start, end, content[match.end():].strip()

    match = _SINGLE_TIME_RE.match(content)
    if match is not None:
        return format_match(match, "start"), "", content[match.end():].strip()

    return "", "", content.strip()


def split_line(line: str) -> SplitLine | None:
    """Split one trimmed, non-empty line into speaker, times and text.

    Args:
        line: A single logical line of transcript text.

    Returns:
        A :class:`SplitLine`, or ``None`` when the line carries no speaker
        label (the caller decides how to fold it).
    """
    matched = _match_speaker(line)
    if matched is None:
        return None

    speaker, content = matched
    start_time, end_time, text = split_times(content)
    return SplitLine(
        speaker=speaker,
        start_time=start_time,
        end_time=end_time,
        text=text,
    )
