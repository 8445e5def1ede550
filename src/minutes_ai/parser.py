"""Free-form transcript parser and format dispatch.

Parses line-oriented transcripts (plain text, and text extracted from
word-processor documents) into
:class:`~minutes_ai.models.transcript.Utterance` sequences, and routes each
declared input kind to the matching parser.

Free-form rules:

- Blank lines are dropped entirely.
- A line with a speaker label opens a new utterance.
- A line without a label is folded onto the open utterance with no
  separator.  If nothing is open yet (first line of the document), it opens
  an unattributed utterance instead.
"""

from __future__ import annotations

import logging

from minutes_ai.builder import TranscriptBuilder
from minutes_ai.captions import parse_captions
from minutes_ai.models.transcript import InputKind, ParsedDocument, Utterance
from minutes_ai.splitter import split_line

logger = logging.getLogger(__name__)


def parse_freeform(text: str) -> tuple[Utterance, ...]:
    """Parse free-form transcript text into utterances.

    Args:
        text: Plain transcript text.  Lines are trimmed before parsing, so
            ``\\r\\n`` line endings are handled too.

    Returns:
        Utterances in document order.  Non-blank input always yields at
        least one utterance.
    """
    builder = TranscriptBuilder()

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        split = split_line(line)
        if split is not None:
            builder.open(
                Utterance(
                    speaker=split.speaker,
                    start_time=split.start_time,
                    end_time=split.end_time,
                    text=split.text,
                )
            )
        elif builder.current is not None:
            builder.fold(line)
        else:
            builder.open(Utterance(speaker="", text=line))

    utterances = builder.build()
    logger.debug("Free-form parse produced %d utterance(s)", len(utterances))
    return utterances


def parse_document(
    text: str,
    kind: InputKind,
    source: str = "<string>",
) -> ParsedDocument:
    """Parse decoded transcript text according to its declared kind.

    Caption documents go to the caption parser; plain text and
    word-processor text go to the free-form parser.  A caption document
    without a single usable cue but with non-blank text is re-parsed as
    free-form, so the text still ends up in at least one utterance.

    Args:
        text: The decoded source text.
        kind: Declared input kind.
        source: Label for the transcript origin (e.g. a file path).
            Defaults to ``"<string>"``.

    Returns:
        A :class:`ParsedDocument` with the raw text preserved verbatim.
    """
    if kind is InputKind.CAPTION:
        utterances = parse_captions(text)
        if not utterances and text.strip():
            logger.warning(
                "No caption cues found in %s, falling back to free-form parsing",
                source,
            )
            utterances = parse_freeform(text)
    else:
        utterances = parse_freeform(text)

    logger.info(
        "Parsed %s as %s: %d utterance(s)",
        source,
        kind.name.lower(),
        len(utterances),
    )
    return ParsedDocument(utterances=utterances, raw_text=text, kind=kind, source=source)
