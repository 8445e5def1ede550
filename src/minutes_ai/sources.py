"""Acquisition of transcript text from files.

This is the I/O edge in front of the parsers: it reads bytes, picks the
input kind from the file suffix, and turns the bytes into plain text.
Word-processor documents are reduced to one line per paragraph with
``python-docx``.

Unlike parsing, decoding is strict: undecodable text and corrupt
containers raise :class:`~minutes_ai.exceptions.DocumentDecodeError`.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from docx import Document

from minutes_ai.exceptions import DocumentDecodeError
from minutes_ai.models.transcript import InputKind, ParsedDocument
from minutes_ai.parser import parse_document

logger = logging.getLogger(__name__)

_UTF8_BOM = "\ufeff"


def decode_text(data: bytes, source: str = "<string>") -> str:
    """Decode UTF-8 transcript bytes, dropping a leading byte-order mark.

    Args:
        data: Raw file contents.
        source: Label used in error messages.

    Returns:
        The decoded text.

    Raises:
        DocumentDecodeError: If *data* is not valid UTF-8.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentDecodeError(
            f"Failed to decode {source} as UTF-8: {exc}", source=source
        ) from exc

    return text.removeprefix(_UTF8_BOM)


def extract_docx_text(data: bytes, source: str = "<string>") -> str:
    """Extract plain text from a ``.docx`` container, one paragraph per line.

    Args:
        data: Raw ``.docx`` file contents.
        source: Label used in error messages.

    Returns:
        Paragraph texts joined with newlines.

    Raises:
        DocumentDecodeError: If the container cannot be opened.
    """
    try:
        document = Document(io.BytesIO(data))
    except Exception as exc:  # noqa: BLE001
        raise DocumentDecodeError(
            f"Failed to read Word document {source}: {exc}", source=source
        ) from exc

    paragraphs = [paragraph.text for paragraph in document.paragraphs]
    logger.debug("Extracted %d paragraph(s) from %s", len(paragraphs), source)
    return "\n".join(paragraphs)


def read_source(file_path: str | Path) -> tuple[str, InputKind]:
    """Read a transcript file and return its plain text and input kind.

    Args:
        file_path: Path to a ``.vtt``, ``.txt`` or ``.docx`` file.

    Returns:
        ``(text, kind)``.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
        UnsupportedFormatError: If the suffix is not supported.
        DocumentDecodeError: If the contents cannot be decoded.
    """
    path = Path(file_path)
    kind = InputKind.from_path(path)

    if not path.exists():
        raise FileNotFoundError(f"Transcript file not found: {path}")

    data = path.read_bytes()
    logger.debug("Read %d byte(s) from %s", len(data), path)

    if kind is InputKind.WORD:
        return extract_docx_text(data, source=str(path)), kind
    return decode_text(data, source=str(path)), kind


def load_document(file_path: str | Path) -> ParsedDocument:
    """Read and parse a transcript file.

    Args:
        file_path: Path to the transcript file.  Accepts both :class:`str`
            and :class:`~pathlib.Path`.

    Returns:
        A :class:`ParsedDocument` with ``source`` set to the string form of
        *file_path*.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
        UnsupportedFormatError: If the suffix is not supported.
        DocumentDecodeError: If the contents cannot be decoded.
    """
    text, kind = read_source(file_path)
    return parse_document(text, kind, source=str(Path(file_path)))
