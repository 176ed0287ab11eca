"""Command-line interface for PromptDeck.

Updates: v0.1.0 - 2026-09-22 - Package scaffold for parser, runtime, and command handlers.
"""
