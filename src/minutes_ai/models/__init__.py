"""Data models for minutes-ai."""

from __future__ import annotations

from minutes_ai.models.minutes import MinutesRequest, MinutesResponse, TranscriptEntryPayload
from minutes_ai.models.transcript import InputKind, ParsedDocument, Utterance

__all__ = [
    "InputKind",
    "MinutesRequest",
    "MinutesResponse",
    "ParsedDocument",
    "TranscriptEntryPayload",
    "Utterance",
]
