"""Custom exceptions for minutes-ai.

Parsing itself never raises: unrecognized lines and unparseable times
degrade to empty fields.  These exceptions cover the edges of the system,
where source documents are acquired and where minutes are generated.
"""

from __future__ import annotations


class DocumentDecodeError(Exception):
    """Raised when a source document cannot be turned into text.

    This covers invalid UTF-8 in text formats and corrupt ``.docx``
    containers.  Invalid input fails loudly instead of producing a garbage
    parse.

    Attributes:
        source: Path or label of the document that failed to decode.
    """

    def __init__(self, message: str, source: str = "<string>") -> None:
        super().__init__(message)
        self.source = source


class UnsupportedFormatError(Exception):
    """Raised when a file suffix does not map to a known input kind."""


class MalformedResponseError(Exception):
    """Raised when a minutes collaborator returns an unusable payload.

    Covers empty LLM responses, invalid JSON and Pydantic schema validation
    errors from the API server.  Callers catch this to retry once before
    giving up with :class:`GenerationError`.

    Attributes:
        raw_response: The raw collaborator output that failed to parse.
    """

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class GenerationError(Exception):
    """Raised for unrecoverable minutes-generation failures.

    This covers scenarios where no minutes can be produced at all (API
    connectivity errors, authentication failures, repeated malformed
    responses).  Unlike :class:`MalformedResponseError`, retrying is not
    expected to help.
    """
