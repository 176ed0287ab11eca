"""Settings management utilities for PromptDeck configuration.

Updates:
  v0.6.0 - 2026-09-21 - Replace Prompt Manager GUI/embedding settings with storage, remote sync,
    and completion options.
  v0.5.9 - 2025-12-05 - Tighten dotenv helpers for lint compliance.
  v0.5.7 - 2025-12-04 - Load .env secrets so API keys persist like LiteLLM keys.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger("promptdeck.settings")

ENV_PREFIX = "PROMPTDECK_"
CONFIG_JSON_ENV = f"{ENV_PREFIX}CONFIG_JSON"
ENV_FILE_ENV = f"{ENV_PREFIX}ENV_FILE"
DEFAULT_CONFIG_PATH = Path("config") / "config.json"
DEFAULT_DB_PATH = Path("data") / "promptdeck.db"
_DOTENV_FALLBACK_PATH = ".env"

# Field name -> accepted environment keys (prefixed unless the key is a bare provider name).
_ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "db_path": ("DB_PATH", "DATABASE_PATH"),
    "remote_base_url": ("REMOTE_BASE_URL", "REMOTE_URL"),
    "remote_timeout_seconds": ("REMOTE_TIMEOUT_SECONDS",),
    "remote_list_limit": ("REMOTE_LIST_LIMIT",),
    "remote_max_attempts": ("REMOTE_MAX_ATTEMPTS",),
    "suggestion_limit": ("SUGGESTION_LIMIT",),
    "litellm_model": ("LITELLM_MODEL",),
    "litellm_api_key": ("LITELLM_API_KEY", "AZURE_OPENAI_API_KEY"),
    "litellm_api_base": ("LITELLM_API_BASE", "AZURE_OPENAI_ENDPOINT"),
    "litellm_api_version": ("LITELLM_API_VERSION", "AZURE_OPENAI_API_VERSION"),
    "litellm_drop_params": ("LITELLM_DROP_PARAMS",),
    "litellm_timeout_seconds": ("LITELLM_TIMEOUT_SECONDS",),
}
_UNPREFIXED_ALIASES = frozenset(
    {"AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_VERSION"}
)
_JSON_KEYS = frozenset(_ENV_ALIASES) - {"litellm_api_key"}
_JSON_SECRET_KEYS = frozenset({"litellm_api_key", "AZURE_OPENAI_API_KEY"})


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    override = os.getenv(ENV_FILE_ENV)
    if override is not None:
        candidate = override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when PromptDeck configuration cannot be loaded or validated."""


class PromptDeckSettings(BaseSettings):
    """Application configuration sourced from keyword overrides, JSON, and the environment."""

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite key-value store path.")
    remote_base_url: str | None = Field(
        default=None,
        description="Base URL of the remote prompt service; unset keeps sync unavailable.",
    )
    remote_timeout_seconds: float = Field(default=15.0, gt=0)
    remote_list_limit: int = Field(default=100, ge=1, le=1000)
    remote_max_attempts: int = Field(default=3, ge=1, le=10)
    suggestion_limit: int = Field(default=5, ge=1, le=50)
    litellm_model: str | None = Field(
        default=None,
        description="LiteLLM model used by the `complete` command.",
    )
    litellm_api_key: str | None = Field(default=None, description="LiteLLM API key.", repr=False)
    litellm_api_base: str | None = Field(
        default=None,
        description="Optional LiteLLM API base URL override.",
    )
    litellm_api_version: str | None = Field(
        default=None,
        description="Optional LiteLLM API version (useful for Azure OpenAI).",
    )
    litellm_drop_params: list[str] | None = Field(
        default=None,
        description="Request parameters removed before calling LiteLLM.",
    )
    litellm_timeout_seconds: float | None = Field(default=None, gt=0)

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": ENV_PREFIX,
            "case_sensitive": False,
            "populate_by_name": True,
        },
    )

    @field_validator("db_path", mode="before")
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None or not str(value).strip():
            raise ValueError("a filesystem path is required")
        return Path(str(value).strip()).expanduser().resolve()

    @field_validator(
        "remote_base_url",
        "litellm_model",
        "litellm_api_key",
        "litellm_api_base",
        "litellm_api_version",
        mode="before",
    )
    def _strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    @field_validator("remote_base_url")
    def _validate_remote_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("remote_base_url must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("litellm_drop_params", mode="before")
    def _normalise_drop_params(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return None
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError:
                items = [item.strip() for item in stripped.split(",") if item.strip()]
            else:
                if isinstance(parsed, list):
                    items = [str(item).strip() for item in parsed if str(item).strip()]
                else:
                    items = [str(parsed).strip()]
            return items or None
        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            sequence_value = cast("Sequence[object]", value)
            items = [str(item).strip() for item in sequence_value if str(item).strip()]
            return items or None
        raise ValueError(
            "litellm_drop_params must be a list, comma-separated string, or JSON array"
        )

    @property
    def sync_configured(self) -> bool:
        """Return True when a remote prompt service URL is set."""
        return self.remote_base_url is not None

    @property
    def completion_configured(self) -> bool:
        return self.litellm_model is not None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(db_path="...")).
            2. JSON configuration file.
            3. Environment variables / aliases, then ``.env`` values.
            4. File secrets.
        """
        return (
            init_settings,
            cast("PydanticBaseSettingsSource", _json_config_source),
            cast("PydanticBaseSettingsSource", _env_with_aliases),
            file_secret_settings,
        )


def _env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
    """Collect settings from ``PROMPTDECK_*`` variables, aliases, and ``.env``."""
    dotenv = _read_dotenv_values()

    def _lookup(candidate: str) -> str | None:
        value = os.getenv(candidate)
        if value is None:
            value = dotenv.get(candidate)
        if value is None:
            return None
        return value.strip() or None

    data: dict[str, Any] = {}
    for field_name, keys in _ENV_ALIASES.items():
        for key in (field_name.upper(), *keys):
            candidate = key if key in _UNPREFIXED_ALIASES else f"{ENV_PREFIX}{key}"
            value = _lookup(candidate)
            if value is not None:
                data[field_name] = value
                break
    return data


def _json_config_source(_: BaseSettings | None = None) -> dict[str, Any]:
    """Return settings from ``PROMPTDECK_CONFIG_JSON`` or ``config/config.json``.

    An explicitly configured file must exist; the default location is optional.
    Secrets found in the file are ignored with a warning.
    """
    explicit_path = os.getenv(CONFIG_JSON_ENV)
    if explicit_path and explicit_path.strip():
        path = Path(explicit_path.strip()).expanduser()
        if not path.exists():
            raise SettingsError(f"Configuration file not found: {path}")
    else:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            return {}
    try:
        raw_contents = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
        raise SettingsError(f"Unable to read configuration file: {path}") from exc
    try:
        data = json.loads(raw_contents)
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
    if not isinstance(data, Mapping):
        raise SettingsError(f"Configuration file {path} must contain a JSON object")
    data_dict = {str(key): value for key, value in cast("Mapping[object, Any]", data).items()}

    removed_secrets = sorted(key for key in _JSON_SECRET_KEYS if key in data_dict)
    if removed_secrets:
        logger.warning(
            "Ignoring secret key(s) %s in configuration file %s; "
            "set credentials via environment variables instead.",
            ", ".join(removed_secrets),
            path,
        )
    mapped = {key: value for key, value in data_dict.items() if key in _JSON_KEYS}
    if "db_path" not in mapped and "database_path" in data_dict:
        mapped["db_path"] = data_dict["database_path"]
    return mapped


def load_settings(**overrides: Any) -> PromptDeckSettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptDeckSettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError(f"Invalid PromptDeck configuration: {exc}") from exc


__all__ = [
    "CONFIG_JSON_ENV",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DB_PATH",
    "ENV_PREFIX",
    "PromptDeckSettings",
    "SettingsError",
    "load_settings",
]
