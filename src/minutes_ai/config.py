"""Configuration loading for minutes-ai.

Reads settings from environment variables (with .env support via
python-dotenv) and validates that everything the selected minutes backend
needs is present.  The resulting :class:`Settings` object is passed
explicitly to the generator that talks to the LLM; the parsers never read
it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

LLM_BACKENDS = ("gemini", "ollama")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        llm_backend: ``"gemini"`` or ``"ollama"`` (default ``"gemini"``).
        gemini_api_key: API key for Google Gemini.
        gemini_model: Gemini model identifier.
        ollama_url: Base URL of the Ollama server.
        ollama_model: Ollama model name.
        use_api_server: Route generation through the minutes API server
            instead of calling the LLM directly.
        api_server_url: Base URL of the minutes API server.
        api_server_key: API key sent to the minutes API server.
        log_level: Logging level (default ``"INFO"``).
    """

    llm_backend: str = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama2"
    use_api_server: bool = False
    api_server_url: str = "http://localhost:3000"
    api_server_key: str = ""
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"Settings(llm_backend={self.llm_backend!r}, "
            f"gemini_api_key='***', "
            f"gemini_model={self.gemini_model!r}, "
            f"ollama_url={self.ollama_url!r}, "
            f"ollama_model={self.ollama_model!r}, "
            f"use_api_server={self.use_api_server!r}, "
            f"api_server_url={self.api_server_url!r}, "
            f"api_server_key='***', "
            f"log_level={self.log_level!r})"
        )


def _parse_bool(env_var: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {env_var}: {raw!r}")


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the project root
    is picked up automatically.

    Which variables are required depends on the route to the LLM:

    - ``USE_API_SERVER=true``: ``API_SERVER_URL`` and ``API_SERVER_KEY``.
    - ``LLM_BACKEND=gemini``: ``GEMINI_API_KEY``.
    - ``LLM_BACKEND=ollama``: ``OLLAMA_URL`` and ``OLLAMA_MODEL`` (both have
      defaults, so they are only missing when set to blank).

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If the backend name or a boolean is invalid, or if any
            required variable is missing, empty, or whitespace-only.  The
            error message names **all** missing variables.
    """
    load_dotenv()

    env_fields = {
        "LLM_BACKEND": "llm_backend",
        "GEMINI_API_KEY": "gemini_api_key",
        "GEMINI_MODEL": "gemini_model",
        "OLLAMA_URL": "ollama_url",
        "OLLAMA_MODEL": "ollama_model",
        "API_SERVER_URL": "api_server_url",
        "API_SERVER_KEY": "api_server_key",
        "LOG_LEVEL": "log_level",
    }

    values: dict[str, object] = {}
    blank: set[str] = set()

    for env_var, field_name in env_fields.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        if raw.strip():
            values[field_name] = raw.strip()
        else:
            blank.add(env_var)

    use_api_server = os.environ.get("USE_API_SERVER", "").strip()
    if use_api_server:
        values["use_api_server"] = _parse_bool("USE_API_SERVER", use_api_server)

    backend = str(values.get("llm_backend", "gemini")).lower()
    if backend not in LLM_BACKENDS:
        choices = ", ".join(LLM_BACKENDS)
        raise ConfigError(f"Invalid LLM_BACKEND: {backend!r} (expected one of: {choices})")
    values["llm_backend"] = backend

    if values.get("use_api_server"):
        required = ["API_SERVER_URL", "API_SERVER_KEY"]
    elif backend == "gemini":
        required = ["GEMINI_API_KEY"]
    else:
        required = ["OLLAMA_URL", "OLLAMA_MODEL"]

    missing = [
        env_var
        for env_var in required
        if env_var in blank or (env_var not in os.environ and _has_no_default(env_var))
    ]

    if missing:
        names = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {names}")

    return Settings(**values)  # type: ignore[arg-type]


def _has_no_default(env_var: str) -> bool:
    """Return True for variables whose :class:`Settings` field has no usable default."""
    return env_var in {"GEMINI_API_KEY", "API_SERVER_KEY"}
