"""Minutes generators backed by an LLM.

Three routes produce minutes from a :class:`~minutes_ai.models.minutes.MinutesRequest`:

- :class:`GeminiClient` calls Google Gemini through the ``google-genai`` SDK.
- :class:`OllamaClient` calls a local Ollama server over HTTP.
- :class:`ApiServerClient` delegates the whole job to a minutes API server,
  which picks the LLM itself from the settings forwarded with the request.

All of them retry once on an empty or malformed reply and raise
:class:`~minutes_ai.exceptions.GenerationError` when no minutes can be
produced.  :func:`build_generator` selects one from explicit
:class:`~minutes_ai.config.Settings`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from pydantic import ValidationError

from minutes_ai.config import Settings
from minutes_ai.exceptions import GenerationError, MalformedResponseError
from minutes_ai.export import clean_minutes_markdown
from minutes_ai.models.minutes import MinutesRequest, MinutesResponse
from minutes_ai.prompts import (
    build_system_prompt,
    build_user_prompt,
    format_transcript_for_llm,
)

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 2


class MinutesGenerator(Protocol):
    """Anything that turns a :class:`MinutesRequest` into Markdown minutes."""

    def generate_minutes(self, request: MinutesRequest) -> str:
        """Return the generated minutes as Markdown."""
        ...


def _prompts_for(request: MinutesRequest) -> tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for *request*.

    The parsed transcript is preferred; the raw text is used when parsing
    produced no utterances.
    """
    if request.transcript:
        transcript_text = format_transcript_for_llm(request.utterances)
    else:
        transcript_text = request.raw_transcript

    system_prompt = build_system_prompt(request.template, request.prompt)
    user_prompt = build_user_prompt(
        transcript_text,
        file_name=request.file_name,
        meeting_date=request.meeting_date,
    )
    return system_prompt, user_prompt


def _require_text(raw_text: str | None) -> str:
    """Return the cleaned minutes, or raise if nothing is left after cleaning.

    ``<think>`` blocks are removed first, so a reply made only of model
    reasoning counts as empty.
    """
    minutes = clean_minutes_markdown(raw_text or "")
    if not minutes:
        raise MalformedResponseError("Empty response from LLM", raw_response=raw_text or "")
    return minutes


def _with_retry(label: str, attempt_once: Callable[[], str]) -> str:
    """Run *attempt_once*, retrying a single time on a malformed reply.

    Raises:
        GenerationError: If both attempts return malformed replies, or if
            *attempt_once* raises :class:`GenerationError` itself.
    """
    last_error: MalformedResponseError | None = None
    for attempt in range(1, _MAX_ATTEMPTS + 1):
        try:
            minutes = attempt_once()
        except MalformedResponseError as exc:
            last_error = exc
            if attempt < _MAX_ATTEMPTS:
                logger.warning(
                    "Malformed %s response on attempt %d, retrying: %s",
                    label,
                    attempt,
                    exc,
                )
            continue

        logger.info("%s returned %d character(s) of minutes", label, len(minutes))
        return minutes

    logger.error(
        "%s response malformed after %d attempts. Raw response: %s | Error: %s",
        label,
        _MAX_ATTEMPTS,
        last_error.raw_response if last_error else "<unknown>",
        last_error,
    )
    raise GenerationError(
        f"{label} returned an unusable response after {_MAX_ATTEMPTS} attempts: {last_error}"
    )


class GeminiClient:
    """Minutes generator using Google Gemini.

    Args:
        api_key: Google Gemini API key.
        model: Model identifier to use for generation.  Defaults to
            ``"gemini-2.0-flash"``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model

    def generate_minutes(self, request: MinutesRequest) -> str:
        """Generate Markdown minutes for *request*.

        Raises:
            GenerationError: If the Gemini API is unreachable, returns a
                non-recoverable error, or returns empty text twice.
        """
        system_prompt, user_prompt = _prompts_for(request)
        logger.debug("System prompt sent to Gemini:\n%s", system_prompt)
        logger.debug("User prompt sent to Gemini:\n%s", user_prompt)

        config = genai_types.GenerateContentConfig(system_instruction=system_prompt)
        return _with_retry("Gemini", lambda: _require_text(self._call_api(user_prompt, config)))

    def _call_api(
        self,
        user_prompt: str,
        config: genai_types.GenerateContentConfig,
    ) -> str:
        """Call the Gemini API and return the raw response text.

        Raises:
            GenerationError: On API-level failures (network, auth, etc.).
        """
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as exc:
            logger.error("Gemini API error: %s", exc)
            raise GenerationError(f"Gemini API call failed: {exc}") from exc

        return response.text or ""


class OllamaClient:
    """Minutes generator using an Ollama server.

    Args:
        base_url: Ollama base URL, e.g. ``"http://localhost:11434"``.
        model: Ollama model name.
        timeout: Request timeout in seconds.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = 300.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._transport = transport

    def generate_minutes(self, request: MinutesRequest) -> str:
        """Generate Markdown minutes for *request*.

        Raises:
            GenerationError: If the server cannot be reached, answers with
                an error status, or returns an unusable body twice.
        """
        system_prompt, user_prompt = _prompts_for(request)
        payload = {
            "model": self._model,
            "system": system_prompt,
            "prompt": user_prompt,
            "stream": False,
        }
        return _with_retry("Ollama", lambda: self._call_api(payload))

    def _call_api(self, payload: dict[str, object]) -> str:
        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = client.post("/api/generate", json=payload)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Ollama API call failed (status): %s | body: %s", exc, exc.response.text)
            raise GenerationError(f"Ollama API call failed: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Ollama API call failed: %s", exc)
            raise GenerationError(f"Ollama API call failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"Invalid JSON: {exc}", raw_response=resp.text
            ) from exc

        response_text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(response_text, str):
            raise MalformedResponseError("Missing 'response' field", raw_response=resp.text)
        return _require_text(response_text)


class ApiServerClient:
    """Minutes generator delegating to the minutes API server.

    Requests carry the API key in the ``X-API-Key`` header.  The LLM
    selection is forwarded with every request so the server can call the
    same backend the user configured locally.

    Args:
        base_url: API server base URL, e.g. ``"http://localhost:3000"``.
        api_key: API key for the server.
        llm_backend: ``"gemini"`` or ``"ollama"``.
        gemini_api_key: Forwarded Gemini key.
        ollama_url: Forwarded Ollama URL.
        ollama_model: Forwarded Ollama model.
        timeout: Request timeout in seconds.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        llm_backend: str = "gemini",
        gemini_api_key: str = "",
        ollama_url: str = "",
        ollama_model: str = "",
        timeout: float = 300.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {"X-API-Key": api_key}
        self._llm_settings = {
            "llmType": llm_backend,
            "geminiApiKey": gemini_api_key,
            "ollamaUrl": ollama_url,
            "ollamaModel": ollama_model,
        }
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    def check_health(self) -> bool:
        """Return True if the server answers its health check with 200.

        Connection problems are logged and reported as ``False``.
        """
        try:
            with self._client() as client:
                resp = client.get("/health")
        except httpx.HTTPError as exc:
            logger.warning("API server health check failed: %s", exc)
            return False

        healthy = resp.status_code == 200
        logger.debug("API server health check: status=%d", resp.status_code)
        return healthy

    def generate_minutes(self, request: MinutesRequest) -> str:
        """Generate Markdown minutes for *request* on the API server.

        Raises:
            GenerationError: If the server cannot be reached, answers with
                an error status, or returns an invalid body twice.
        """
        payload = {**request.model_dump(by_alias=True), **self._llm_settings}
        return _with_retry("API server", lambda: self._call_api(payload))

    def _call_api(self, payload: dict[str, object]) -> str:
        try:
            with self._client() as client:
                resp = client.post("/api/generate-minutes", json=payload)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "API server call failed (status): %s | body: %s", exc, exc.response.text
            )
            raise GenerationError(f"API server call failed: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("API server call failed: %s", exc)
            raise GenerationError(f"API server call failed: {exc}") from exc

        try:
            reply = MinutesResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Schema validation failed: {exc}", raw_response=resp.text
            ) from exc
        return _require_text(reply.minutes)


def build_generator(settings: Settings) -> MinutesGenerator:
    """Select the minutes generator described by *settings*.

    Args:
        settings: Explicit application settings.

    Returns:
        An :class:`ApiServerClient` when the API server is enabled,
        otherwise a :class:`GeminiClient` or :class:`OllamaClient`
        according to ``settings.llm_backend``.
    """
    if settings.use_api_server:
        logger.info("Using API server at %s for generation", settings.api_server_url)
        return ApiServerClient(
            base_url=settings.api_server_url,
            api_key=settings.api_server_key,
            llm_backend=settings.llm_backend,
            gemini_api_key=settings.gemini_api_key,
            ollama_url=settings.ollama_url,
            ollama_model=settings.ollama_model,
        )

    if settings.llm_backend == "ollama":
        logger.info("Using Ollama model %s for generation", settings.ollama_model)
        return OllamaClient(base_url=settings.ollama_url, model=settings.ollama_model)

    logger.info("Using Gemini model %s for generation", settings.gemini_model)
    return GeminiClient(api_key=settings.gemini_api_key, model=settings.gemini_model)
