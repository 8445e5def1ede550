"""Transcript data models for normalized meeting transcripts.

These dataclasses represent the structured output of the transcript
parsers.  They are intentionally simple stdlib dataclasses (not Pydantic):
the parsing core has no third-party dependencies.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from pathlib import Path

from minutes_ai.exceptions import UnsupportedFormatError


class InputKind(enum.Enum):
    """Declared kind of a transcript source.

    The value is the file suffix (without the dot) that selects the kind.
    """

    CAPTION = "vtt"
    TEXT = "txt"
    WORD = "docx"

    @classmethod
    def from_path(cls, path: str | Path) -> InputKind:
        """Select the input kind from a file name suffix.

        Args:
            path: File path or bare file name.  The suffix is compared
                case-insensitively.

        Returns:
            The matching :class:`InputKind`.

        Raises:
            UnsupportedFormatError: If the suffix is not ``.vtt``,
                ``.txt`` or ``.docx``.
        """
        suffix = Path(path).suffix.lower().lstrip(".")
        for kind in cls:
            if kind.value == suffix:
                return kind

        supported = ", ".join(f".{kind.value}" for kind in cls)
        raise UnsupportedFormatError(
            f"Unsupported transcript format: {path} (supported: {supported})"
        )


@dataclass(frozen=True)
class Utterance:
    """A single normalized speaker turn.

    Attributes:
        speaker: Display name.  Empty only for an unattributed first entry.
        start_time: Canonical ``HH:MM:SS.mmm`` string, or ``""`` if unknown.
        end_time: Canonical ``HH:MM:SS.mmm`` string, or ``""`` if unknown.
        text: Utterance content.
    """

    speaker: str
    start_time: str = ""
    end_time: str = ""
    text: str = ""

    def appended(self, text: str, end_time: str | None = None) -> Utterance:
        """Return a copy with *text* concatenated onto this utterance.

        No separator is inserted.  The start time is never touched; the end
        time is replaced only when *end_time* is given.
        """
        if end_time is None:
            return replace(self, text=self.text + text)
        return replace(self, text=self.text + text, end_time=end_time)

    def to_dict(self) -> dict[str, str]:
        """Return the camelCase wire representation."""
        return {
            "speaker": self.speaker,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "text": self.text,
        }


@dataclass(frozen=True)
class ParsedDocument:
    """Top-level return type of the format dispatcher.

    Attributes:
        utterances: Normalized speaker turns, in document order.
        raw_text: The untouched source text, kept for verbatim re-export.
        kind: The declared input kind the document was parsed as.
        source: File path of the parsed transcript, or ``"<string>"``.
    """

    utterances: tuple[Utterance, ...]
    raw_text: str
    kind: InputKind
    source: str = "<string>"

    @property
    def speakers(self) -> list[str]:
        """Unique non-empty speaker names, ordered by first appearance."""
        return list(dict.fromkeys(u.speaker for u in self.utterances if u.speaker))

    @property
    def is_empty(self) -> bool:
        return not self.utterances and not self.raw_text.strip()
