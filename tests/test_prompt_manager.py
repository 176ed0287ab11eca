"""Tests for the PromptManager façade.

Updates:
  v0.4.0 - 2026-10-19 - Cover remote ids surviving a restart and changed-field-only updates.
  v0.3.0 - 2026-09-20 - Cover immutable-field patches and monotonic timestamps.
  v0.2.0 - 2026-09-19 - Cover remote-wins sync enablement and propagation.
  v0.1.0 - 2026-09-03 - Cover local CRUD and persistence.
"""

from __future__ import annotations

from itertools import chain, repeat
from typing import TYPE_CHECKING

import pytest

from core.exceptions import ValidationError
from core.prompt_manager import REMOTE_IDS_KEY, PromptManager, PromptStorage, SyncCoordinator
from models.category_model import PromptCategory
from models.search_model import SearchFilters, SortKey

from .support import FIXED_NOW, FakeRemote

if TYPE_CHECKING:
    from core.repository import KeyValueRepository

    from .support import PromptFactory


def _manager(
    repository: KeyValueRepository,
    remote: FakeRemote | None = None,
    **kwargs: object,
) -> PromptManager:
    sync = SyncCoordinator(remote) if remote is not None else None
    return PromptManager(
        PromptStorage(repository),
        sync=sync,
        clock=lambda: FIXED_NOW,
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.mark.asyncio()
async def test_create_prompt_normalises_and_persists(kv_repository: KeyValueRepository) -> None:
    manager = _manager(kv_repository)
    await manager.start()

    prompt = manager.create_prompt(
        "  Launch email  ",
        "Announce the launch.",
        "marketing",
        ["email", "Email", " launch "],
    )
    await manager.close()

    assert prompt.title == "Launch email"
    assert prompt.category is PromptCategory.MARKETING
    assert prompt.tags == ["email", "launch"]
    assert prompt.created_at == prompt.updated_at == FIXED_NOW
    assert prompt.is_favorite is False

    reloaded = _manager(kv_repository)
    await reloaded.start()
    assert reloaded.prompts == (prompt,)


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    ("title", "content", "category"),
    [
        ("   ", "Body", "writing"),
        ("Title", "", "writing"),
        ("Title", "Body", "cooking"),
    ],
)
async def test_create_prompt_rejects_invalid_input(
    kv_repository: KeyValueRepository, title: str, content: str, category: str
) -> None:
    manager = _manager(kv_repository)
    await manager.start()

    with pytest.raises(ValidationError):
        manager.create_prompt(title, content, category)

    assert manager.prompts == ()
    await manager.close()


@pytest.mark.asyncio()
async def test_create_prompt_retries_colliding_ids(kv_repository: KeyValueRepository) -> None:
    ids = chain(["dup", "dup", "fresh"], repeat("spare"))
    manager = _manager(kv_repository, id_factory=lambda: next(ids))
    await manager.start()

    first = manager.create_prompt("One", "Body", "writing")
    second = manager.create_prompt("Two", "Body", "writing")
    await manager.close()

    assert (first.id, second.id) == ("dup", "fresh")


@pytest.mark.asyncio()
async def test_update_bumps_timestamp_even_with_frozen_clock(
    kv_repository: KeyValueRepository,
) -> None:
    manager = _manager(kv_repository)
    await manager.start()
    prompt = manager.create_prompt("Draft", "Body", "writing")

    first = manager.update_prompt(prompt.id, {"title": "Draft v2"})
    second = manager.update_prompt(prompt.id, {"category": PromptCategory.DESIGN})
    await manager.close()

    assert first is not None
    assert second is not None
    assert prompt.updated_at < first.updated_at < second.updated_at
    assert second.created_at == prompt.created_at
    assert second.title == "Draft v2"
    assert second.category is PromptCategory.DESIGN


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "changes",
    [
        {"id": "other"},
        {"created_at": FIXED_NOW},
        {"updated_at": FIXED_NOW},
        {"colour": "blue"},
        {"title": ""},
        {"is_favorite": "yes"},
        {"tags": "single"},
    ],
)
async def test_update_rejects_invalid_patches(
    kv_repository: KeyValueRepository, changes: dict[str, object]
) -> None:
    manager = _manager(kv_repository)
    await manager.start()
    prompt = manager.create_prompt("Stable", "Body", "writing")

    with pytest.raises(ValidationError):
        manager.update_prompt(prompt.id, changes)

    assert manager.get_prompt(prompt.id) == prompt
    await manager.close()


@pytest.mark.asyncio()
async def test_missing_ids_are_silent_no_ops(kv_repository: KeyValueRepository) -> None:
    manager = _manager(kv_repository)
    await manager.start()

    assert manager.update_prompt("ghost", {"title": "x"}) is None
    assert manager.delete_prompt("ghost") is False
    assert manager.toggle_favorite("ghost") is None
    assert manager.get_prompt("ghost") is None
    await manager.close()


@pytest.mark.asyncio()
async def test_toggle_favorite_twice_restores_flag(kv_repository: KeyValueRepository) -> None:
    manager = _manager(kv_repository)
    await manager.start()
    prompt = manager.create_prompt("Fav", "Body", "personal")

    once = manager.toggle_favorite(prompt.id)
    twice = manager.toggle_favorite(prompt.id)
    await manager.close()

    assert once is not None and once.is_favorite is True
    assert twice is not None and twice.is_favorite is False
    assert twice.updated_at > once.updated_at


@pytest.mark.asyncio()
async def test_delete_removes_prompt_and_persists(kv_repository: KeyValueRepository) -> None:
    manager = _manager(kv_repository)
    await manager.start()
    keep = manager.create_prompt("Keep", "Body", "writing")
    drop = manager.create_prompt("Drop", "Body", "writing")

    assert manager.delete_prompt(drop.id) is True
    await manager.close()

    reloaded = _manager(kv_repository)
    await reloaded.start()
    assert [prompt.id for prompt in reloaded.prompts] == [keep.id]


@pytest.mark.asyncio()
async def test_mutations_without_sync_never_touch_remote(
    kv_repository: KeyValueRepository,
) -> None:
    remote = FakeRemote()
    manager = _manager(kv_repository, remote)
    await manager.start()

    prompt = manager.create_prompt("Local", "Body", "writing")
    manager.update_prompt(prompt.id, {"title": "Local v2"})
    manager.delete_prompt(prompt.id)
    await manager.close()

    assert manager.sync_enabled is False
    assert remote.calls == []
    assert remote.closed is True


@pytest.mark.asyncio()
async def test_enable_sync_replaces_local_collection_with_remote(
    kv_repository: KeyValueRepository, make_prompt: PromptFactory
) -> None:
    remote_prompts = [make_prompt(title="Remote A"), make_prompt(title="Remote B")]
    remote = FakeRemote(remote_prompts)
    manager = _manager(kv_repository, remote)
    await manager.start()
    manager.create_prompt("Local only", "Body", "writing")

    assert await manager.enable_sync() is True
    await manager.close()

    assert [prompt.title for prompt in manager.prompts] == ["Remote A", "Remote B"]
    assert remote.operations() == ["list"]

    reloaded = _manager(kv_repository, FakeRemote())
    await reloaded.start()
    assert reloaded.sync_enabled is True
    assert [prompt.title for prompt in reloaded.prompts] == ["Remote A", "Remote B"]
    await reloaded.close()


@pytest.mark.asyncio()
async def test_enable_sync_failure_keeps_local_state(kv_repository: KeyValueRepository) -> None:
    manager = _manager(kv_repository, FakeRemote(fail_on={"list"}))
    await manager.start()
    prompt = manager.create_prompt("Local", "Body", "writing")

    assert await manager.enable_sync() is False
    await manager.close()

    assert manager.sync_enabled is False
    assert manager.prompts == (prompt,)


@pytest.mark.asyncio()
async def test_enable_sync_without_remote_returns_false(
    kv_repository: KeyValueRepository,
) -> None:
    manager = _manager(kv_repository)
    await manager.start()

    assert manager.sync_available is False
    assert await manager.enable_sync() is False
    await manager.close()


@pytest.mark.asyncio()
async def test_enabled_sync_propagates_each_mutation(kv_repository: KeyValueRepository) -> None:
    remote = FakeRemote()
    manager = _manager(kv_repository, remote)
    await manager.start()
    await manager.enable_sync()

    prompt = manager.create_prompt("Mirrored", "Body", "development", ["api"])
    manager.toggle_favorite(prompt.id)
    manager.delete_prompt(prompt.id)
    await manager.flush()

    assert remote.operations() == ["list", "create", "update", "delete"]
    update_call = remote.calls[2]
    assert update_call[1] == prompt.id
    assert update_call[2]["is_favorite"] is True
    assert update_call[2] == {"is_favorite": True}
    await manager.close()


@pytest.mark.asyncio()
async def test_remote_failures_do_not_roll_back_local_changes(
    kv_repository: KeyValueRepository,
) -> None:
    remote = FakeRemote(fail_on={"create", "update"})
    manager = _manager(kv_repository, remote)
    await manager.start()
    await manager.enable_sync()

    prompt = manager.create_prompt("Resilient", "Body", "writing")
    manager.update_prompt(prompt.id, {"content": "Edited body"})
    await manager.flush()

    stored = manager.get_prompt(prompt.id)
    assert stored is not None
    assert stored.content == "Edited body"
    await manager.close()


@pytest.mark.asyncio()
async def test_disable_sync_keeps_collection_and_stops_propagation(
    kv_repository: KeyValueRepository, make_prompt: PromptFactory
) -> None:
    remote = FakeRemote([make_prompt(title="Remote")])
    manager = _manager(kv_repository, remote)
    await manager.start()
    await manager.enable_sync()

    await manager.disable_sync()
    manager.create_prompt("Offline", "Body", "writing")
    await manager.close()

    assert [prompt.title for prompt in manager.prompts] == ["Remote", "Offline"]
    assert remote.operations() == ["list"]

    reloaded = _manager(kv_repository, FakeRemote())
    await reloaded.start()
    assert reloaded.sync_enabled is False
    await reloaded.close()


@pytest.mark.asyncio()
async def test_stored_sync_flag_without_remote_starts_disabled(
    kv_repository: KeyValueRepository,
) -> None:
    await PromptStorage(kv_repository).save_sync_enabled(True)

    manager = _manager(kv_repository)
    await manager.start()

    assert manager.sync_enabled is False
    assert await PromptStorage(kv_repository).load_sync_enabled() is True
    await manager.close()


@pytest.mark.asyncio()
async def test_search_and_suggest_use_current_collection(
    kv_repository: KeyValueRepository,
) -> None:
    async with _manager(kv_repository, suggestion_limit=1) as manager:
        manager.create_prompt("Marketing Copy Generator", "Write copy.", "marketing", ["sales"])
        manager.create_prompt("Blog Post Writer", "Share marketing tactics.", "writing")

        results = manager.search(
            SearchFilters(query="marketing", sort_by=SortKey.RELEVANCE), now=FIXED_NOW
        )
        suggestions = manager.suggest("mark")
        stats = manager.filter_stats(results)

    assert [result.prompt.title for result in results] == [
        "Marketing Copy Generator",
        "Blog Post Writer",
    ]
    assert suggestions == ["Marketing Copy Generator"]
    assert stats.total_prompts == 2
    assert stats.filtered_prompts == 2


@pytest.mark.asyncio()
async def test_remote_ids_survive_a_restart(kv_repository: KeyValueRepository) -> None:
    first_remote = FakeRemote(remote_id_prefix="srv-")
    first = _manager(kv_repository, first_remote)
    await first.start()
    await first.enable_sync()
    kept = first.create_prompt("Kept", "Body", "development")
    dropped = first.create_prompt("Dropped", "Body", "writing")
    await first.close()

    assert kv_repository.get(REMOTE_IDS_KEY) is not None

    second_remote = FakeRemote(remote_id_prefix="srv-")
    second = _manager(kv_repository, second_remote)
    await second.start()
    second.update_prompt(kept.id, {"title": "Kept and renamed"})
    second.delete_prompt(dropped.id)
    await second.close()

    assert second_remote.calls == [
        ("update", f"srv-{kept.id}", {"title": "Kept and renamed"}),
        ("delete", f"srv-{dropped.id}"),
    ]
    assert await PromptStorage(kv_repository).load_remote_ids() == {kept.id: f"srv-{kept.id}"}


@pytest.mark.asyncio()
async def test_enabling_sync_again_clears_stored_remote_ids(
    kv_repository: KeyValueRepository,
) -> None:
    await PromptStorage(kv_repository).save_remote_ids({"prompt-1": "srv-prompt-1"})
    manager = _manager(kv_repository, FakeRemote())
    await manager.start()

    assert await manager.enable_sync() is True
    await manager.close()

    assert await PromptStorage(kv_repository).load_remote_ids() == {}
