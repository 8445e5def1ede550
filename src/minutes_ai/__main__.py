"""Entry point for ``python -m minutes_ai``.

Provides a CLI that accepts a transcript file and runs the
transcript-to-minutes pipeline.  Uses stdlib :mod:`argparse` for argument
parsing (no extra dependencies).

Subcommands:
    run   -- Default. Parse a transcript, generate minutes, export files.
    parse -- Print the normalized transcript without calling an LLM.

Exit codes:
    0 -- Completed successfully.
    1 -- An error occurred (file not found, unsupported format, decode
         failure, config error).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from minutes_ai.config import ConfigError
from minutes_ai.dates import extract_date
from minutes_ai.demo_output import print_pipeline_result
from minutes_ai.exceptions import DocumentDecodeError, UnsupportedFormatError
from minutes_ai.export import format_transcript_export
from minutes_ai.log import setup_logging
from minutes_ai.pipeline import run_pipeline
from minutes_ai.sources import load_document

_INPUT_ERRORS = (
    FileNotFoundError,
    PermissionError,
    IsADirectoryError,
    UnsupportedFormatError,
    DocumentDecodeError,
)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands.

    Returns:
        Configured :class:`argparse.ArgumentParser` with ``run`` and
        ``parse`` subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="minutes-ai",
        description="Generate meeting minutes from a meeting transcript.",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- "run" subcommand (default) -----------------------------------
    run_parser = subparsers.add_parser(
        "run",
        help="Parse a transcript and generate minutes.",
    )
    run_parser.add_argument(
        "transcript_file",
        type=str,
        help="Path to the .vtt, .txt or .docx transcript file.",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Parse and export the transcript but skip minutes generation.",
    )
    run_parser.add_argument(
        "--template",
        type=str,
        default=None,
        help="Markdown minutes template file (default: built-in template).",
    )
    run_parser.add_argument(
        "--prompt",
        type=str,
        default=None,
        help="Text file with LLM instructions (default: built-in instructions).",
    )
    run_parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for <name>.txt and <name>_minutes.md exports.",
    )
    run_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )

    # --- "parse" subcommand -------------------------------------------
    parse_parser = subparsers.add_parser(
        "parse",
        help="Print the normalized transcript.",
    )
    parse_parser.add_argument(
        "transcript_file",
        type=str,
        help="Path to the .vtt, .txt or .docx transcript file.",
    )
    parse_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print utterances and the meeting date as JSON.",
    )
    parse_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )

    return parser


def _resolve_command(
    parser: argparse.ArgumentParser,
    argv: list[str],
) -> argparse.Namespace:
    """Parse *argv* with an implicit ``run`` subcommand.

    If the first token is not a known subcommand (whether it is a
    positional path or an option flag like ``--dry-run``), the ``run``
    subcommand is prepended so that ``python -m minutes_ai file.vtt``
    works.

    Args:
        parser: The top-level argument parser.
        argv: Command-line arguments.

    Returns:
        Parsed :class:`argparse.Namespace`.
    """
    known_subcommands = {"run", "parse"}
    if not argv:
        argv = ["run"]
    elif argv[0] in {"-h", "--help"}:
        pass
    elif argv[0] not in known_subcommands:
        argv = ["run", *argv]

    return parser.parse_args(argv)


def _read_optional_text(path_arg: str | None) -> str | None:
    if path_arg is None:
        return None
    return Path(path_arg).read_text(encoding="utf-8")


def _handle_run(args: argparse.Namespace) -> int:
    """Execute the ``run`` subcommand.

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    transcript_path = Path(args.transcript_file)

    try:
        template = _read_optional_text(args.template)
        instructions = _read_optional_text(args.prompt)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else None

    try:
        result = run_pipeline(
            transcript_path=transcript_path,
            dry_run=args.dry_run,
            template=template,
            instructions=instructions,
            output_dir=output_dir,
        )
    except (*_INPUT_ERRORS, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print_pipeline_result(result)
    return 0


def _handle_parse(args: argparse.Namespace) -> int:
    """Execute the ``parse`` subcommand.

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    transcript_path = Path(args.transcript_file)

    try:
        document = load_document(transcript_path)
    except _INPUT_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        payload = {
            "source": document.source,
            "meetingDate": extract_date(transcript_path.stem),
            "utterances": [u.to_dict() for u in document.utterances],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(format_transcript_export(document.utterances))

    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the minutes-ai CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``
            when ``None`` (the normal case).

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    parser = build_parser()
    args = _resolve_command(parser, argv if argv is not None else sys.argv[1:])

    log_level = "DEBUG" if getattr(args, "verbose", False) else "INFO"
    setup_logging(log_level)

    if args.command == "parse":
        return _handle_parse(args)

    return _handle_run(args)


if __name__ == "__main__":
    raise SystemExit(main())
