"""Unit tests for the CLI entrypoint.

Tests cover: the implicit ``run`` subcommand, flags forwarded to the
pipeline, error exit codes, and the ``parse`` subcommand in text and JSON
form.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from minutes_ai.__main__ import main
from minutes_ai.config import ConfigError
from minutes_ai.pipeline import PipelineResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_transcript(tmp_path: Path, name: str = "定例_2024-03-05.txt") -> Path:
    """Create a minimal transcript file and return its path."""
    transcript = tmp_path / name
    transcript.write_text("田中 0:05 おはようございます\n鈴木: よろしく\n続き\n", encoding="utf-8")
    return transcript


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRunCommand:
    """Unit tests for ``minutes_ai.__main__.main`` with the run subcommand."""

    def test_valid_file_runs_pipeline(self, tmp_path: Path) -> None:
        """Valid file -> pipeline invoked, exit code 0."""
        transcript = _make_transcript(tmp_path)
        mock_result = PipelineResult(transcript_path=transcript)

        with (
            patch("minutes_ai.__main__.run_pipeline", return_value=mock_result) as mock_run,
            patch("minutes_ai.__main__.print_pipeline_result") as mock_print,
        ):
            exit_code = main([str(transcript)])

        assert exit_code == 0
        mock_run.assert_called_once_with(
            transcript_path=transcript,
            dry_run=False,
            template=None,
            instructions=None,
            output_dir=None,
        )
        mock_print.assert_called_once_with(mock_result)

    def test_explicit_run_subcommand(self, tmp_path: Path) -> None:
        transcript = _make_transcript(tmp_path)

        with (
            patch("minutes_ai.__main__.run_pipeline") as mock_run,
            patch("minutes_ai.__main__.print_pipeline_result"),
        ):
            exit_code = main(["run", str(transcript)])

        assert exit_code == 0
        mock_run.assert_called_once()

    def test_flags_forwarded(self, tmp_path: Path) -> None:
        transcript = _make_transcript(tmp_path)
        template = tmp_path / "template.md"
        template.write_text("## {{会議名}}", encoding="utf-8")
        prompt = tmp_path / "prompt.txt"
        prompt.write_text("簡潔に。", encoding="utf-8")
        out = tmp_path / "out"

        with (
            patch("minutes_ai.__main__.run_pipeline") as mock_run,
            patch("minutes_ai.__main__.print_pipeline_result"),
        ):
            exit_code = main(
                [
                    "--dry-run",
                    str(transcript),
                    "--template",
                    str(template),
                    "--prompt",
                    str(prompt),
                    "--output-dir",
                    str(out),
                ]
            )

        assert exit_code == 0
        kwargs = mock_run.call_args.kwargs
        assert kwargs["dry_run"] is True
        assert kwargs["template"] == "## {{会議名}}"
        assert kwargs["instructions"] == "簡潔に。"
        assert kwargs["output_dir"] == out

    def test_missing_template_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        transcript = _make_transcript(tmp_path)

        with patch("minutes_ai.__main__.run_pipeline") as mock_run:
            exit_code = main([str(transcript), "--template", str(tmp_path / "none.md")])

        assert exit_code == 1
        mock_run.assert_not_called()
        assert "Error:" in capsys.readouterr().err

    def test_verbose_flag_sets_debug_logging(self, tmp_path: Path) -> None:
        transcript = _make_transcript(tmp_path)

        with (
            patch("minutes_ai.__main__.run_pipeline"),
            patch("minutes_ai.__main__.print_pipeline_result"),
            patch("minutes_ai.__main__.setup_logging") as mock_setup,
        ):
            main(["-v", str(transcript)])

        mock_setup.assert_called_once_with("DEBUG")

    def test_missing_file_argument_shows_usage(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2

    def test_nonexistent_file_shows_error(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = main(["--dry-run", str(tmp_path / "missing.txt")])

        assert exit_code == 1
        assert "Transcript file not found" in capsys.readouterr().err

    def test_unsupported_format(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        audio = tmp_path / "meeting.mp3"
        audio.write_bytes(b"\x00")

        exit_code = main(["--dry-run", str(audio)])

        assert exit_code == 1
        assert "Unsupported transcript format" in capsys.readouterr().err

    def test_config_error(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transcript = _make_transcript(tmp_path)

        with patch(
            "minutes_ai.__main__.run_pipeline",
            side_effect=ConfigError("Missing required environment variables: GEMINI_API_KEY"),
        ):
            exit_code = main([str(transcript)])

        assert exit_code == 1
        assert "GEMINI_API_KEY" in capsys.readouterr().err

    def test_dry_run_end_to_end(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transcript = _make_transcript(tmp_path)

        exit_code = main(["--dry-run", str(transcript)])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Meeting date: 2024-03-05" in out
        assert "[DRY RUN]" in out


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


class TestParseCommand:
    def test_text_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transcript = _make_transcript(tmp_path)

        exit_code = main(["parse", str(transcript)])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "[00:00:05.000] 田中: おはようございます\n\n鈴木: よろしく続き\n"
        )

    def test_json_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transcript = _make_transcript(tmp_path)

        exit_code = main(["parse", "--json", str(transcript)])

        out = capsys.readouterr().out
        payload = json.loads(out)
        assert exit_code == 0
        assert "田中" in out
        assert payload["source"] == str(transcript)
        assert payload["meetingDate"] == "2024-03-05"
        assert payload["utterances"][0] == {
            "speaker": "田中",
            "startTime": "00:00:05.000",
            "endTime": "",
            "text": "おはようございます",
        }

    def test_json_without_date(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transcript = _make_transcript(tmp_path, name="notes.txt")

        main(["parse", "--json", str(transcript)])

        assert json.loads(capsys.readouterr().out)["meetingDate"] is None

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["parse", str(tmp_path / "missing.vtt")])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_utf8(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transcript = tmp_path / "sjis.txt"
        transcript.write_bytes("田中: はい".encode("shift_jis"))

        exit_code = main(["parse", str(transcript)])

        assert exit_code == 1
        assert "UTF-8" in capsys.readouterr().err
