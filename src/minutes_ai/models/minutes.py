"""Pydantic models for minutes generation.

Defines the payloads exchanged with minutes collaborators:

- :class:`TranscriptEntryPayload` -- one utterance in its camelCase wire
  form.
- :class:`MinutesRequest` -- everything a generator needs: the raw and the
  parsed transcript, file name, meeting date, template and instructions.
- :class:`MinutesResponse` -- the API server's reply.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from minutes_ai.models.transcript import ParsedDocument, Utterance


class TranscriptEntryPayload(BaseModel):
    """A single utterance as sent over the wire.

    Attributes:
        speaker: Speaker name, possibly empty.
        start_time: Canonical start time or ``""`` (``startTime`` on the wire).
        end_time: Canonical end time or ``""`` (``endTime`` on the wire).
        text: Utterance content.
    """

    model_config = ConfigDict(populate_by_name=True)

    speaker: str
    start_time: str = Field(default="", alias="startTime")
    end_time: str = Field(default="", alias="endTime")
    text: str

    @classmethod
    def from_utterance(cls, utterance: Utterance) -> TranscriptEntryPayload:
        return cls.model_validate(utterance.to_dict())


class MinutesRequest(BaseModel):
    """Input for a minutes generator.

    Attributes:
        raw_transcript: Verbatim source text.
        transcript: Parsed utterances, in document order.
        file_name: Transcript file name without its extension.
        meeting_date: ``YYYY-MM-DD`` guessed from the file name, or ``""``.
        template: Markdown minutes template.
        prompt: Instructions for the LLM.
    """

    model_config = ConfigDict(populate_by_name=True)

    raw_transcript: str = Field(alias="rawTranscript")
    transcript: list[TranscriptEntryPayload] = Field(default_factory=list)
    file_name: str = Field(default="", alias="fileName")
    meeting_date: str = Field(default="", alias="meetingDate")
    template: str = ""
    prompt: str = ""

    @classmethod
    def from_document(
        cls,
        document: ParsedDocument,
        file_name: str,
        meeting_date: str | None,
        template: str,
        prompt: str,
    ) -> MinutesRequest:
        """Build a request from a parsed document and generation inputs."""
        return cls(
            raw_transcript=document.raw_text,
            transcript=[
                TranscriptEntryPayload.from_utterance(u) for u in document.utterances
            ],
            file_name=file_name,
            meeting_date=meeting_date or "",
            template=template,
            prompt=prompt,
        )

    @property
    def utterances(self) -> list[Utterance]:
        """The transcript entries converted back to :class:`Utterance` objects."""
        return [
            Utterance(
                speaker=entry.speaker,
                start_time=entry.start_time,
                end_time=entry.end_time,
                text=entry.text,
            )
            for entry in self.transcript
        ]


class MinutesResponse(BaseModel):
    """Reply from the minutes API server.

    Attributes:
        minutes: Generated minutes as Markdown.
    """

    minutes: str = Field(min_length=1)
