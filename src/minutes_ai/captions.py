"""Caption (WebVTT) transcript parser.

Meeting tools export captions as cue blocks::

    WEBVTT

    00:00:01.000 --> 00:00:04.500
    <v 山田太郎>おはようございます。</v>

Only the first payload line of each cue is read.  Consecutive cues from
the same speaker are merged into one utterance that spans both cues.
"""

from __future__ import annotations

import logging
import re

from minutes_ai.builder import TranscriptBuilder
from minutes_ai.models.transcript import Utterance
from minutes_ai.timecode import format_timecode

logger = logging.getLogger(__name__)

#: Speaker assigned to cues without a ``<v Name>`` voice tag.
UNKNOWN_SPEAKER = "不明"

_CUE_MARKER = "-->"

_CUE_TIMING_RE = re.compile(
    r"([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})\.([0-9]{1,3})"
    r"\s+-->\s+"
    r"([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})\.([0-9]{1,3})"
)
_VOICE_TAG_RE = re.compile(r"<v\s+([^>]+)>")
_VOICE_MARKUP_RE = re.compile(r"<v\s+[^>]+>|</v>")


def _split_payload(payload: str) -> tuple[str, str]:
    """Return ``(speaker, text)`` for a cue payload line."""
    match = _VOICE_TAG_RE.search(payload)
    if match is None:
        return UNKNOWN_SPEAKER, payload
    return match.group(1).strip(), _VOICE_MARKUP_RE.sub("", payload).strip()


def parse_captions(text: str) -> tuple[Utterance, ...]:
    """Parse WebVTT caption text into utterances.

    Args:
        text: Decoded caption document.

    Returns:
        Utterances in document order.  Header lines before the first cue,
        unparseable timing lines and cues without a payload line produce
        nothing.
    """
    lines = [line.strip() for line in text.split("\n")]
    builder = TranscriptBuilder()

    index = 0
    while index < len(lines) and _CUE_MARKER not in lines[index]:
        index += 1

    dropped = 0
    while index < len(lines):
        line = lines[index]
        index += 1

        if _CUE_MARKER not in line:
            continue

        timing = _CUE_TIMING_RE.search(line)
        if timing is None:
            logger.debug("Skipping unparseable cue timing: %r", line)
            continue

        if index >= len(lines) or not lines[index] or _CUE_MARKER in lines[index]:
            dropped += 1
            continue

        payload = lines[index]
        index += 1

        start_time = format_timecode(*timing.group(1, 2, 3, 4))
        end_time = format_timecode(*timing.group(5, 6, 7, 8))
        speaker, cue_text = _split_payload(payload)

        current = builder.current
        if current is not None and current.speaker == speaker:
            builder.fold(cue_text, end_time=end_time)
        else:
            builder.open(
                Utterance(
                    speaker=speaker,
                    start_time=start_time,
                    end_time=end_time,
                    text=cue_text,
                )
            )

    utterances = builder.build()
    logger.debug(
        "Caption parse produced %d utterance(s), dropped %d empty cue(s)",
        len(utterances),
        dropped,
    )
    return utterances
