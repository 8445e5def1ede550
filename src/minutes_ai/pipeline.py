"""Pipeline orchestrator for the transcript-to-minutes workflow.

Wires all components together: source loading and parsing, meeting-date
guessing, minutes generation, and export.  The top-level entry point is
:func:`run_pipeline`, which returns a :class:`PipelineResult` suitable for
rendering by the demo output formatter.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from minutes_ai.config import Settings, load_settings
from minutes_ai.dates import extract_date
from minutes_ai.exceptions import GenerationError
from minutes_ai.export import clean_minutes_markdown, write_exports
from minutes_ai.llm import MinutesGenerator, build_generator
from minutes_ai.models.minutes import MinutesRequest
from minutes_ai.models.transcript import ParsedDocument
from minutes_ai.prompts import DEFAULT_INSTRUCTIONS, DEFAULT_TEMPLATE
from minutes_ai.sources import load_document

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass
class PipelineResult:
    """Aggregated result from the full pipeline run.

    Attributes:
        transcript_path: Path to the input transcript file.
        document: The parsed transcript, or ``None`` before parsing.
        meeting_date: ``YYYY-MM-DD`` guessed from the file name, or ``None``.
        minutes: Generated minutes (``<think>`` blocks removed), or ``""``.
        written_files: Files written by the export stage.
        warnings: Non-fatal warnings from any pipeline stage.
        duration_seconds: Wall-clock time for the full pipeline.
        dry_run: Whether the pipeline ran in dry-run mode.
    """

    transcript_path: Path
    document: ParsedDocument | None = None
    meeting_date: str | None = None
    minutes: str = ""
    written_files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    dry_run: bool = False

    @property
    def speakers_found(self) -> list[str]:
        return self.document.speakers if self.document else []

    @property
    def utterance_count(self) -> int:
        return len(self.document.utterances) if self.document else 0


# ---------------------------------------------------------------------------
# Pipeline entry point
# ---------------------------------------------------------------------------


def run_pipeline(
    transcript_path: Path,
    settings: Settings | None = None,
    dry_run: bool = False,
    template: str | None = None,
    instructions: str | None = None,
    output_dir: Path | None = None,
    today: date | None = None,
    generator: MinutesGenerator | None = None,
) -> PipelineResult:
    """Run the full transcript-to-minutes pipeline.

    Executes three stages:

    1. **Load and Parse** -- read the transcript, normalize it into
       utterances, and guess the meeting date from the file name.
    2. **Generate Minutes** -- ask the configured LLM route to fill the
       template.  Skipped in dry-run mode and for empty transcripts.
    3. **Export** -- write the normalized transcript and the minutes to
       *output_dir*, when given.

    File-system and decoding errors are raised immediately.  Generation
    failures are recorded as warnings and leave ``minutes`` empty.

    Args:
        transcript_path: Path to the ``.vtt``, ``.txt`` or ``.docx`` file.
        settings: Explicit settings.  Loaded from the environment when
            ``None`` and generation is needed.
        dry_run: If ``True``, parse (and export) but skip generation.
        template: Markdown minutes template; defaults to
            :data:`~minutes_ai.prompts.DEFAULT_TEMPLATE`.
        instructions: LLM instructions; defaults to
            :data:`~minutes_ai.prompts.DEFAULT_INSTRUCTIONS`.
        output_dir: Directory for exports; nothing is written when ``None``.
        today: Override for the current date (year-less file-name dates).
        generator: Override for the minutes generator (useful for testing).

    Returns:
        A :class:`PipelineResult` with all pipeline outputs.

    Raises:
        FileNotFoundError: If *transcript_path* does not exist.
        UnsupportedFormatError: If the file suffix is not supported.
        DocumentDecodeError: If the file contents cannot be decoded.
        ConfigError: If settings must be loaded and are incomplete.
    """
    start_time = time.monotonic()
    result = PipelineResult(transcript_path=transcript_path, dry_run=dry_run)

    # ------------------------------------------------------------------
    # Stage 1: Load and Parse
    # ------------------------------------------------------------------
    logger.info("Stage 1: Loading and parsing transcript from %s", transcript_path)

    document = load_document(transcript_path)
    result.document = document
    result.meeting_date = extract_date(transcript_path.stem, today=today)

    if result.meeting_date is None:
        result.warnings.append(f"No meeting date found in file name: {transcript_path.name}")

    logger.info(
        "Stage 1 complete: %d speaker(s), %d utterance(s), meeting date %s",
        len(result.speakers_found),
        result.utterance_count,
        result.meeting_date or "unknown",
    )

    # ------------------------------------------------------------------
    # Stage 2: Generate Minutes
    # ------------------------------------------------------------------
    if dry_run:
        logger.info("Stage 2: Dry-run mode -- skipping minutes generation")
    elif document.is_empty:
        logger.info("Transcript is empty, skipping minutes generation")
        result.warnings.append("Transcript is empty; no minutes generated")
    else:
        logger.info("Stage 2: Generating minutes via LLM")
        result.minutes = _generate(
            document,
            transcript_path.stem,
            result,
            settings=settings,
            template=template,
            instructions=instructions,
            generator=generator,
        )

    # ------------------------------------------------------------------
    # Stage 3: Export
    # ------------------------------------------------------------------
    if output_dir is not None:
        logger.info("Stage 3: Exporting to %s", output_dir)
        result.written_files = write_exports(
            output_dir,
            transcript_path.stem,
            document.utterances,
            result.minutes,
            source=transcript_path,
        )

    result.duration_seconds = time.monotonic() - start_time
    logger.info("Pipeline complete in %.1fs", result.duration_seconds)
    return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _generate(
    document: ParsedDocument,
    file_name: str,
    result: PipelineResult,
    settings: Settings | None,
    template: str | None,
    instructions: str | None,
    generator: MinutesGenerator | None,
) -> str:
    """Run the generation stage, recording failures as warnings."""
    if not template:
        logger.warning("No template given, using the default minutes template")
    if not instructions:
        logger.warning("No LLM instructions given, using the default instructions")

    request = MinutesRequest.from_document(
        document,
        file_name=file_name,
        meeting_date=result.meeting_date,
        template=template or DEFAULT_TEMPLATE,
        prompt=instructions or DEFAULT_INSTRUCTIONS,
    )

    if generator is None:
        generator = build_generator(settings or load_settings())

    try:
        minutes = clean_minutes_markdown(generator.generate_minutes(request))
    except GenerationError as exc:
        msg = f"Minutes generation failed: {exc}"
        result.warnings.append(msg)
        logger.error(msg)
        return ""

    if not minutes:
        msg = "Minutes generation returned no content"
        result.warnings.append(msg)
        logger.warning(msg)
        return ""

    logger.info("Stage 2 complete: %d character(s) of minutes", len(minutes))
    return minutes
