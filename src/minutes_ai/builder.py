"""Ordered utterance accumulator shared by the transcript parsers."""

from __future__ import annotations

from minutes_ai.models.transcript import Utterance


class TranscriptBuilder:
    """Ordered accumulator holding the current open utterance.

    Closed utterances are never touched again; only the open one grows,
    and only through :meth:`fold`.
    """

    def __init__(self) -> None:
        self._closed: list[Utterance] = []
        self._open: Utterance | None = None

    @property
    def current(self) -> Utterance | None:
        """The open utterance, or ``None`` before the first one."""
        return self._open

    def open(self, utterance: Utterance) -> None:
        """Close the current utterance (if any) and open *utterance*."""
        if self._open is not None:
            self._closed.append(self._open)
        self._open = utterance

    def fold(self, text: str, end_time: str | None = None) -> None:
        """Append *text* to the open utterance, optionally moving its end time.

        Raises:
            RuntimeError: If no utterance is open.
        """
        if self._open is None:
            raise RuntimeError("No open utterance to fold into")
        self._open = self._open.appended(text, end_time=end_time)

    def build(self) -> tuple[Utterance, ...]:
        """Return all utterances in document order."""
        if self._open is None:
            return tuple(self._closed)
        return (*self._closed, self._open)
