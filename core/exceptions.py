"""Common exception classes for the core package.

All exceptions ultimately inherit from :class:`PromptDeckError`, allowing
callers to catch a single base class for any service failure while still
distinguishing individual error categories when needed.

Only :class:`ValidationError` is raised out of the mutation API. Persistence
and sync failures are recovered locally (logged, local state stands); the
classes exist so the lower layers can signal them to the façade.

Updates:
  v0.3.0 - 2026-09-20 - Add completion collaborator errors.
  v0.2.0 - 2026-09-08 - Add SyncError for remote mirroring failures.
  v0.1.0 - 2026-08-24 - Created module.
"""

from __future__ import annotations


class PromptDeckError(Exception):
    """Base exception for PromptDeck failures."""


class ValidationError(PromptDeckError):
    """Raised when a mutation receives invalid input and does not proceed."""


class PersistenceError(PromptDeckError):
    """Raised when loading or saving the durable prompt collection fails."""


class SyncError(PromptDeckError):
    """Raised when a call to the remote prompt service fails."""


class CompletionError(PromptDeckError):
    """Raised when the text-completion collaborator fails."""


class CompletionUnavailable(CompletionError):
    """Raised when text completion is requested but not configured."""
