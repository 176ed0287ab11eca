"""Configuration helpers for PromptDeck.

Updates: v0.3.0 - 2026-09-21 - Export PromptDeck settings loader and error types.
Updates: v0.1.0 - 2025-10-30 - Package scaffold.
"""

from .settings import (
    CONFIG_JSON_ENV,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DB_PATH,
    ENV_PREFIX,
    PromptDeckSettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "CONFIG_JSON_ENV",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DB_PATH",
    "ENV_PREFIX",
    "PromptDeckSettings",
    "SettingsError",
    "load_settings",
]
