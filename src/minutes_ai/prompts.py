"""Prompt builders for the minutes-generation step.

Constructs the system and user prompts that ask an LLM to fill a Markdown
minutes template from a meeting transcript.  Also provides a helper to
render parsed :class:`~minutes_ai.models.transcript.Utterance` objects as
compact text for the prompt.
"""

from __future__ import annotations

from collections.abc import Iterable

from minutes_ai.models.transcript import Utterance

DEFAULT_TEMPLATE = """\
## 会議タイトル
{{会議名}}
## 日時・メンバー
- 日時: {{日時}}
- 開催場所: オンライン
- メンバー(順不同・敬称略):
  - {{メンバー1}}
  - {{メンバー2}}

## 目的
{{会議の目的}}

## アジェンダ
- {{アジェンダ1}}
- {{アジェンダ2}}

## 各議題と内容
### {{議題1}}
{{議題1の内容}}
### {{議題2}}
{{議題2の内容}}

## 宿題
- {{宿題1}}
- {{宿題2}}

## メモ
{{メモ}}
"""

DEFAULT_INSTRUCTIONS = """\
・トランスクリプトファイルから議事録を作成してください。
・テンプレートの各項目に適切な内容を入れてください。
・できる限り詳しく記述してください。
・重要なポイントを強調してください。
・会議の内容以外は出力しないでください。
"""


def build_system_prompt(template: str = "", instructions: str = "") -> str:
    """Build the system prompt for a minutes-generation call.

    Blank *template* or *instructions* fall back to
    :data:`DEFAULT_TEMPLATE` and :data:`DEFAULT_INSTRUCTIONS`.

    Args:
        template: Markdown minutes template with ``{{placeholder}}`` slots.
        instructions: Free-text instructions for the LLM.

    Returns:
        The complete system prompt string.
    """
    template = template if template.strip() else DEFAULT_TEMPLATE
    instructions = instructions if instructions.strip() else DEFAULT_INSTRUCTIONS

    return f"""\
You are an assistant that writes meeting minutes from meeting transcripts.

## Instructions

{instructions.strip()}

## Minutes Template

Fill in every ``{{{{placeholder}}}}`` of the following Markdown template with
content taken from the transcript.  Keep the headings and their order.

{template.strip()}

## Transcript Format

Each transcript line reads ``[start-end] Speaker: text``.  Times are
``HH:MM:SS.mmm`` and may be missing.  An empty speaker means the line could
not be attributed.

## Output Format

Return only the completed Markdown minutes.  Do not wrap them in a code
block and do not add commentary before or after them.
"""


def build_user_prompt(
    transcript_text: str,
    file_name: str = "",
    meeting_date: str = "",
) -> str:
    """Build the user prompt containing the transcript to summarize.

    Args:
        transcript_text: The transcript, either raw text or the output of
            :func:`format_transcript_for_llm`.
        file_name: Transcript file name, a hint for the meeting title.
        meeting_date: ``YYYY-MM-DD`` meeting date, if known.

    Returns:
        The user prompt string wrapping the transcript.
    """
    header: list[str] = []
    if file_name:
        header.append(f"File name: {file_name}")
    if meeting_date:
        header.append(f"Meeting date: {meeting_date}")

    preamble = "\n".join(header) + "\n\n" if header else ""
    return (
        f"{preamble}"
        "Write the meeting minutes for the following transcript:\n\n"
        f"{transcript_text}"
    )


def _time_bracket(utterance: Utterance) -> str:
    if utterance.start_time and utterance.end_time:
        return f"[{utterance.start_time}-{utterance.end_time}] "
    if utterance.start_time:
        return f"[{utterance.start_time}] "
    return ""


def format_transcript_for_llm(utterances: Iterable[Utterance]) -> str:
    """Convert parsed utterances into compact text for the LLM prompt.

    Each utterance becomes one ``[start-end] Speaker: text`` line.  The
    time bracket is shortened to ``[start]`` without an end time and left
    out entirely without a start time.

    Args:
        utterances: Parsed utterances.

    Returns:
        A newline-separated string.  Returns an empty string if
        *utterances* is empty.
    """
    return "\n".join(
        f"{_time_bracket(utterance)}{utterance.speaker}: {utterance.text}"
        for utterance in utterances
    )
