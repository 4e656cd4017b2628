"""Tests for pre-value reconciliation.

Uses ``AsyncMock`` stores to assert exactly which store calls happen for
each branch, and the in-memory store to check stored identities survive
a merge.
"""

from unittest.mock import AsyncMock

import pytest

from typesync.adapters.memory import InMemoryDefinitionStore
from typesync.sync.models import Definition, PreValue, PreValueCollection
from typesync.sync.prevalues import PreValueReconciler


def _store(existing: PreValueCollection | None = None) -> AsyncMock:
    store = AsyncMock()
    store.get_pre_values.return_value = existing or PreValueCollection()
    return store


def _saved(store: AsyncMock) -> dict[str, PreValue]:
    definition_id, pre_values = store.save_pre_values.await_args.args
    assert definition_id == 7
    return pre_values


class TestConstruction:
    def test_store_is_required(self) -> None:
        with pytest.raises(ValueError, match="store is required"):
            PreValueReconciler(None)


# ==================================================================
# Newly created definitions
# ==================================================================


class TestInitial:
    """Verify initial() always writes a full set."""

    @pytest.mark.asyncio
    async def test_none_saves_empty_set(self) -> None:
        store = _store()

        await PreValueReconciler(store).initial(7, None)

        store.save_pre_values.assert_awaited_once_with(7, {})
        store.get_pre_values.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_saves_empty_set(self) -> None:
        store = _store()

        await PreValueReconciler(store).initial(7, {})

        store.save_pre_values.assert_awaited_once_with(7, {})

    @pytest.mark.asyncio
    async def test_values_saved_as_new_entries(self) -> None:
        store = _store()

        await PreValueReconciler(store).initial(7, {"swatches": "red,green", "mode": "hex"})

        saved = _saved(store)
        assert list(saved) == ["swatches", "mode"]
        assert saved["swatches"].value == "red,green"
        # Ids belong to the store
        assert all(p.id is None for p in saved.values())


# ==================================================================
# Existing definitions
# ==================================================================


class TestMerge:
    """Verify merge() treats the desired map as authoritative."""

    @pytest.mark.asyncio
    async def test_none_touches_nothing(self) -> None:
        store = _store()

        await PreValueReconciler(store).merge(7, None)

        assert store.mock_calls == []

    @pytest.mark.asyncio
    async def test_empty_clears_stored_values(self) -> None:
        store = _store(PreValueCollection(entries={"a": PreValue(value="1", id=3)}))

        await PreValueReconciler(store).merge(7, {})

        store.save_pre_values.assert_awaited_once_with(7, {})

    @pytest.mark.asyncio
    async def test_existing_key_keeps_identity(self) -> None:
        store = _store(
            PreValueCollection(
                entries={"swatches": PreValue(value="red,green", id=11, sort_order=2)}
            )
        )

        await PreValueReconciler(store).merge(7, {"swatches": "red,blue,green"})

        saved = _saved(store)
        assert saved["swatches"] == PreValue(value="red,blue,green", id=11, sort_order=2)

    @pytest.mark.asyncio
    async def test_new_key_added(self) -> None:
        store = _store(PreValueCollection(entries={"a": PreValue(value="1", id=3)}))

        await PreValueReconciler(store).merge(7, {"a": "1", "b": "2"})

        saved = _saved(store)
        assert saved["a"].id == 3
        assert saved["b"] == PreValue(value="2")

    @pytest.mark.asyncio
    async def test_unlisted_keys_dropped(self) -> None:
        store = _store(
            PreValueCollection(
                entries={
                    "a": PreValue(value="0", id=3),
                    "b": PreValue(value="9", id=4),
                }
            )
        )

        await PreValueReconciler(store).merge(7, {"a": "1"})

        assert {k: p.value for k, p in _saved(store).items()} == {"a": "1"}

    @pytest.mark.asyncio
    async def test_existing_entries_not_mutated(self) -> None:
        entry = PreValue(value="old", id=3)
        store = _store(PreValueCollection(entries={"a": entry}))

        await PreValueReconciler(store).merge(7, {"a": "new"})

        assert entry.value == "old"

    @pytest.mark.asyncio
    async def test_positional_storage_never_written(self) -> None:
        store = _store(
            PreValueCollection(
                is_key_addressable=False,
                items=[PreValue(value="one"), PreValue(value="two", sort_order=1)],
            )
        )

        await PreValueReconciler(store).merge(7, {"x": "1"})

        store.get_pre_values.assert_awaited_once_with(7)
        store.save_pre_values.assert_not_awaited()


class TestMergeAgainstMemoryStore:
    """Round trip through a real store implementation."""

    @pytest.mark.asyncio
    async def test_stored_ids_survive_merge(self) -> None:
        store = InMemoryDefinitionStore()
        definition = await store.create(Definition(name="Picker", editor="picker"))
        reconciler = PreValueReconciler(store)

        await reconciler.initial(definition.id, {"a": "1", "b": "2"})
        before = (await store.get_pre_values(definition.id)).entries

        await reconciler.merge(definition.id, {"b": "3", "c": "4"})
        after = (await store.get_pre_values(definition.id)).entries

        assert {k: p.value for k, p in after.items()} == {"b": "3", "c": "4"}
        assert after["b"].id == before["b"].id
        assert after["c"].id not in {p.id for p in before.values()}
