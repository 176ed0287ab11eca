"""Runtime boot helpers for the PromptDeck CLI.

Updates:
  v0.1.1 - 2025-12-10 - Add LiteLLM logging toggle helper.
  v0.1.0 - 2025-12-04 - Extract logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")
_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Proxy", "LiteLLM Router", "litellm")


def setup_logging(logging_conf_path: Path | None) -> None:
    """Configure logging from *logging_conf_path* (or the default file) when present."""
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
        except Exception as exc:  # noqa: BLE001 - fall back to basic configuration
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("promptdeck.runtime").warning(
                "Invalid logging configuration %s; using defaults", path, exc_info=exc
            )
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def configure_litellm_logging(enabled: bool) -> None:
    """Enable or disable upstream LiteLLM library logs."""
    for name in _LITELLM_LOGGERS:
        litellm_logger = logging.getLogger(name)
        litellm_logger.disabled = not enabled
        litellm_logger.setLevel(logging.NOTSET if enabled else logging.CRITICAL)
