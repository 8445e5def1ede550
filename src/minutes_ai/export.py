"""Export of normalized transcripts and generated minutes.

Renders utterances as a readable plain-text transcript, strips model
"thinking" blocks from generated minutes, and writes both next to each
other as ``<stem>.txt`` and ``<stem>_minutes.md``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from minutes_ai.models.transcript import Utterance

logger = logging.getLogger(__name__)

_THINK_BLOCK_RE = re.compile(r"<think>[\s\S]*?</think>")


def format_transcript_export(utterances: Iterable[Utterance]) -> str:
    """Render utterances as ``[start] speaker: text`` entries.

    Entries are separated by a blank line; the ``[start] `` prefix is left
    out when the start time is unknown.
    """
    return "\n\n".join(
        f"[{u.start_time}] {u.speaker}: {u.text}" if u.start_time else f"{u.speaker}: {u.text}"
        for u in utterances
    )


def clean_minutes_markdown(markdown: str) -> str:
    """Remove ``<think>...</think>`` blocks and surrounding whitespace."""
    return _THINK_BLOCK_RE.sub("", markdown).strip()


def transcript_export_path(
    output_dir: Path,
    stem: str,
    source: Path | None = None,
) -> Path:
    """Return where the transcript export for *stem* goes.

    The export is ``<stem>.txt``, except when that is the *source*
    transcript itself; then it becomes ``<stem>_transcript.txt`` so the
    original text is never overwritten.
    """
    path = output_dir / f"{stem}.txt"
    if source is not None and path.resolve() == source.resolve():
        return output_dir / f"{stem}_transcript.txt"
    return path


def minutes_export_path(output_dir: Path, stem: str) -> Path:
    return output_dir / f"{stem}_minutes.md"


def write_exports(
    output_dir: Path,
    stem: str,
    utterances: Iterable[Utterance],
    minutes: str = "",
    source: Path | None = None,
) -> list[Path]:
    """Write the transcript export and, if present, the cleaned minutes.

    Args:
        output_dir: Destination directory; created if missing.
        stem: Base file name, usually the transcript file name without
            its extension.
        utterances: Normalized utterances to export.
        minutes: Generated Markdown minutes.  Nothing is written for them
            when empty after cleaning.
        source: The transcript file the utterances came from.  It is
            never overwritten.

    Returns:
        The paths written, transcript first.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []

    transcript_path = transcript_export_path(output_dir, stem, source=source)
    if transcript_path.name != f"{stem}.txt":
        logger.warning(
            "Export would overwrite source transcript %s, writing %s instead",
            source,
            transcript_path,
        )
    transcript_path.write_text(format_transcript_export(utterances), encoding="utf-8")
    written.append(transcript_path)

    cleaned = clean_minutes_markdown(minutes)
    if cleaned:
        minutes_path = minutes_export_path(output_dir, stem)
        minutes_path.write_text(cleaned, encoding="utf-8")
        written.append(minutes_path)

    for path in written:
        logger.info("Wrote %s", path)
    return written
