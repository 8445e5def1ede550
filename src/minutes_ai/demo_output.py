"""Console output formatter for the transcript-to-minutes pipeline.

Renders a :class:`~minutes_ai.pipeline.PipelineResult` as structured
console output: transcript metadata, the generated minutes, exported files
and a summary.

The primary entry point is :func:`format_pipeline_result`, which returns
the formatted string.  :func:`print_pipeline_result` is a convenience
wrapper that writes directly to stdout.
"""

from __future__ import annotations

import sys

from minutes_ai.pipeline import PipelineResult

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def format_pipeline_result(result: PipelineResult) -> str:
    """Render a :class:`PipelineResult` as structured console output.

    The output includes three labelled stages and a summary section:

    - **Stage 1** -- Transcript metadata (file, format, date, speakers,
      utterance count).
    - **Stage 2** -- Generated minutes, or why there are none.
    - **Stage 3** -- Exported files.
    - **Summary** -- Warnings and pipeline duration.

    Args:
        result: The pipeline result to format.

    Returns:
        A multi-line string ready for console display.
    """
    lines: list[str] = []

    _append_banner(lines)
    _append_stage1(lines, result)
    _append_stage2(lines, result)
    _append_stage3(lines, result)
    _append_summary(lines, result)
    lines.append(_SEPARATOR)

    return "\n".join(lines)


def print_pipeline_result(result: PipelineResult) -> None:
    """Format and print a :class:`PipelineResult` to stdout."""
    sys.stdout.write(format_pipeline_result(result) + "\n")


# ---------------------------------------------------------------------------
# Internal formatters
# ---------------------------------------------------------------------------


def _append_banner(lines: list[str]) -> None:
    lines.append(_SEPARATOR)
    lines.append("  MEETING MINUTES AI")
    lines.append(_SEPARATOR)


def _append_stage1(lines: list[str], result: PipelineResult) -> None:
    """Append Stage 1: Transcript Loaded."""
    lines.append("")
    lines.append("--- STAGE 1: Transcript Loaded ---")
    lines.append(f"  File: {result.transcript_path}")
    if result.document is not None:
        lines.append(f"  Format: {result.document.kind.name.lower()}")
    lines.append(f"  Meeting date: {result.meeting_date or 'unknown'}")
    speakers = ", ".join(result.speakers_found) if result.speakers_found else "none"
    lines.append(f"  Speakers: {speakers}")
    lines.append(f"  Utterances: {result.utterance_count}")


def _append_stage2(lines: list[str], result: PipelineResult) -> None:
    """Append Stage 2: Minutes Generated."""
    lines.append("")
    lines.append("--- STAGE 2: Minutes ---")

    if result.dry_run:
        lines.append("  [DRY RUN] Minutes generation skipped.")
        return

    if not result.minutes:
        lines.append("  No minutes generated.")
        return

    for line in result.minutes.splitlines():
        lines.append(f"  {line}" if line else "")


def _append_stage3(lines: list[str], result: PipelineResult) -> None:
    """Append Stage 3: Exported Files."""
    lines.append("")
    lines.append("--- STAGE 3: Export ---")

    if not result.written_files:
        lines.append("  Nothing exported.")
        return

    for path in result.written_files:
        lines.append(f"  [WROTE] {path}")


def _append_summary(lines: list[str], result: PipelineResult) -> None:
    lines.append("")
    lines.append("--- SUMMARY ---")
    lines.append(f"  Warnings: {len(result.warnings)}")

    for warning in result.warnings:
        lines.append(f"    - {warning}")

    lines.append(f"  Pipeline duration: {result.duration_seconds:.1f}s")
