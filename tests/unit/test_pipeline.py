"""Unit tests for the transcript-to-minutes pipeline.

The minutes generator is replaced by a small fake so no LLM is called.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from minutes_ai.config import ConfigError, Settings
from minutes_ai.exceptions import GenerationError, UnsupportedFormatError
from minutes_ai.models.minutes import MinutesRequest
from minutes_ai.models.transcript import InputKind
from minutes_ai.pipeline import PipelineResult, run_pipeline
from minutes_ai.prompts import DEFAULT_INSTRUCTIONS, DEFAULT_TEMPLATE

_TODAY = date(2026, 3, 1)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _FakeGenerator:
    """Records requests and returns canned minutes (or raises)."""

    def __init__(self, minutes: str = "# 議事録", error: Exception | None = None) -> None:
        self.minutes = minutes
        self.error = error
        self.requests: list[MinutesRequest] = []

    def generate_minutes(self, request: MinutesRequest) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.minutes


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Stage 1
# ---------------------------------------------------------------------------


class TestParseStage:
    def test_document_and_date(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "定例会議_20240305.txt", "田中: はい\n鈴木: いいえ")

        result = run_pipeline(path, dry_run=True, today=_TODAY)

        assert result.document is not None
        assert result.document.kind is InputKind.TEXT
        assert result.meeting_date == "2024-03-05"
        assert result.speakers_found == ["田中", "鈴木"]
        assert result.utterance_count == 2
        assert result.warnings == []

    def test_missing_date_warns(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "standup.txt", "A: hi")

        result = run_pipeline(path, dry_run=True)

        assert result.meeting_date is None
        assert result.warnings == ["No meeting date found in file name: standup.txt"]

    def test_date_comes_from_stem_not_suffix(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "notes.txt", "A: hi")

        assert run_pipeline(path, dry_run=True).meeting_date is None

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            run_pipeline(tmp_path / "missing.txt", dry_run=True)

    def test_unsupported_format_raises(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "audio.mp3", "")

        with pytest.raises(UnsupportedFormatError):
            run_pipeline(path, dry_run=True)


# ---------------------------------------------------------------------------
# Stage 2
# ---------------------------------------------------------------------------


class TestGenerateStage:
    def test_minutes_generated_and_cleaned(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m_2024-03-05.vtt", (
            "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\n<v 田中>はい</v>\n"
        ))
        generator = _FakeGenerator("<think>hmm</think>\n# 議事録\n")

        result = run_pipeline(path, generator=generator, today=_TODAY)

        assert result.minutes == "# 議事録"
        request = generator.requests[0]
        assert request.file_name == "m_2024-03-05"
        assert request.meeting_date == "2024-03-05"
        assert request.template == DEFAULT_TEMPLATE
        assert request.prompt == DEFAULT_INSTRUCTIONS
        assert request.transcript[0].speaker == "田中"

    def test_custom_template_and_instructions(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")
        generator = _FakeGenerator()

        run_pipeline(path, generator=generator, template="## T", instructions="Be brief.")

        assert generator.requests[0].template == "## T"
        assert generator.requests[0].prompt == "Be brief."

    def test_dry_run_skips_generation(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")
        generator = _FakeGenerator()

        result = run_pipeline(path, dry_run=True, generator=generator)

        assert generator.requests == []
        assert result.minutes == ""
        assert result.dry_run is True

    def test_empty_transcript_skips_generation(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "\n  \n")
        generator = _FakeGenerator()

        result = run_pipeline(path, generator=generator)

        assert generator.requests == []
        assert "Transcript is empty; no minutes generated" in result.warnings

    def test_generation_error_becomes_warning(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")
        generator = _FakeGenerator(error=GenerationError("quota exceeded"))

        result = run_pipeline(path, generator=generator)

        assert result.minutes == ""
        assert any("quota exceeded" in w for w in result.warnings)

    def test_reasoning_only_reply_warns(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")
        generator = _FakeGenerator("<think>reasoning only</think>")

        result = run_pipeline(path, generator=generator)

        assert result.minutes == ""
        assert "Minutes generation returned no content" in result.warnings

    def test_settings_used_to_build_generator(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")
        settings = Settings(gemini_api_key="k")
        generator = _FakeGenerator()

        with patch("minutes_ai.pipeline.build_generator", return_value=generator) as mock_build:
            run_pipeline(path, settings=settings)

        mock_build.assert_called_once_with(settings)
        assert len(generator.requests) == 1

    def test_settings_loaded_when_not_given(self, tmp_path: Path, clean_env: None) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")

        with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
            run_pipeline(path)

    def test_dry_run_never_loads_settings(self, tmp_path: Path, clean_env: None) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")

        result = run_pipeline(path, dry_run=True)

        assert isinstance(result, PipelineResult)


# ---------------------------------------------------------------------------
# Stage 3
# ---------------------------------------------------------------------------


class TestExportStage:
    def test_exports_written(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "定例.txt", "田中 0:05 はい")
        out = tmp_path / "out"

        result = run_pipeline(path, output_dir=out, generator=_FakeGenerator("# 議事録"))

        assert result.written_files == [out / "定例.txt", out / "定例_minutes.md"]
        assert (out / "定例.txt").read_text(encoding="utf-8") == "[00:00:05.000] 田中: はい"

    def test_dry_run_exports_transcript_only(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")
        out = tmp_path / "out"

        result = run_pipeline(path, dry_run=True, output_dir=out)

        assert result.written_files == [out / "m.txt"]

    def test_no_output_dir_writes_nothing(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "m.txt", "A: hi")

        result = run_pipeline(path, dry_run=True)

        assert result.written_files == []
        assert result.duration_seconds >= 0.0

    def test_export_into_source_directory_keeps_source(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "meeting_2024-03-05.txt", "田中: こんにちは\n元気ですか\n")

        result = run_pipeline(path, dry_run=True, output_dir=tmp_path)

        assert path.read_text(encoding="utf-8") == "田中: こんにちは\n元気ですか\n"
        assert result.written_files == [tmp_path / "meeting_2024-03-05_transcript.txt"]
        assert result.document is not None
        assert result.document.raw_text == "田中: こんにちは\n元気ですか\n"
