"""Application entry point for PromptDeck.

Updates:
  v0.10.0 - 2026-09-22 - Run async command handlers on a single event loop and flush on exit.
  v0.9.3 - 2025-12-10 - Apply LiteLLM logging toggle from settings.
  v0.9.0 - 2025-12-04 - Modularise CLI parsing, commands, and runtime helpers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cli.commands import COMMAND_SPECS, EXIT_INIT, EXIT_OK, EXIT_SETTINGS, CommandSpec
from cli.parser import build_parser
from cli.runtime import configure_litellm_logging, setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import build_prompt_manager

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    import argparse
    from collections.abc import Sequence

    from config import PromptDeckSettings
    from core.prompt_manager import PromptManager


async def _initialise_manager(
    settings: PromptDeckSettings,
    logger: logging.Logger,
) -> PromptManager | None:
    try:
        manager = build_prompt_manager(settings)
        await manager.start()
    except Exception as exc:  # noqa: BLE001 - surfaced to CLI
        logger.error("Failed to initialise services: %s", exc)
        return None
    return manager


async def _run_command(
    spec: CommandSpec,
    settings: PromptDeckSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    manager = None
    if spec.requires_manager:
        manager = await _initialise_manager(settings, logger)
        if manager is None:
            return EXIT_INIT
    try:
        return await spec.handler(manager, args, logger, settings)
    finally:
        if manager is not None:
            await manager.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.logging_config)
    configure_litellm_logging(False)

    logger = logging.getLogger("promptdeck.main")
    try:
        settings = load_settings()
    except SettingsError as exc:
        logger.error("Failed to load settings: %s", exc)
        return EXIT_SETTINGS

    if args.print_settings:
        print_settings_summary(settings)
        return EXIT_OK

    spec = COMMAND_SPECS.get(args.command)
    if spec is None:
        parser.print_help()
        return EXIT_OK
    return asyncio.run(_run_command(spec, settings, args, logger))


if __name__ == "__main__":
    raise SystemExit(main())
