"""Sync state container owned by the Prompt Manager façade.

Updates:
  v0.2.0 - 2026-09-10 - Replace user-profile bootstrap with the persisted sync flag.
  v0.1.0 - 2025-12-03 - Extract state initialisation helpers.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["SyncState"]


@dataclass(slots=True)
class SyncState:
    """Whether mutations are mirrored to the remote prompt service.

    Loaded once by :meth:`PromptManager.start` and changed only through
    ``enable_sync``/``disable_sync``, which persist the new value.
    """

    enabled: bool = False
