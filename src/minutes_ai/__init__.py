"""minutes-ai: meeting transcripts to meeting minutes.

Normalizes caption, chat-log and word-processor transcript exports into a
single ordered sequence of speaker utterances, guesses the meeting date
from the file name, and hands both to an LLM to fill a minutes template.
"""

from __future__ import annotations

from minutes_ai.captions import UNKNOWN_SPEAKER, parse_captions
from minutes_ai.dates import DATE_PATTERNS, extract_date
from minutes_ai.exceptions import (
    DocumentDecodeError,
    GenerationError,
    MalformedResponseError,
    UnsupportedFormatError,
)
from minutes_ai.models.transcript import InputKind, ParsedDocument, Utterance
from minutes_ai.parser import parse_document, parse_freeform
from minutes_ai.splitter import SplitLine, split_line
from minutes_ai.timecode import format_timecode, normalize_timecode

__version__ = "0.1.0"

__all__ = [
    "DATE_PATTERNS",
    "DocumentDecodeError",
    "GenerationError",
    "InputKind",
    "MalformedResponseError",
    "ParsedDocument",
    "SplitLine",
    "UNKNOWN_SPEAKER",
    "UnsupportedFormatError",
    "Utterance",
    "extract_date",
    "format_timecode",
    "normalize_timecode",
    "parse_captions",
    "parse_document",
    "parse_freeform",
    "split_line",
]
