"""Tests for the in-memory store and id tracker."""

from uuid import UUID

import pytest

from typesync.adapters.base import DefinitionStore, IdTracker
from typesync.adapters.memory import InMemoryDefinitionStore, InMemoryIdTracker
from typesync.sync.models import DatabaseType, Definition, PreValue

G1 = UUID("6c4d7a4e-2b56-4b2a-8c59-0d7e6b8f1a10")


class TestProtocolConformance:
    def test_store_satisfies_protocol(self) -> None:
        store: DefinitionStore = InMemoryDefinitionStore()
        for method in (
            "get_all",
            "create",
            "update",
            "get_by_name",
            "get_pre_values",
            "save_pre_values",
        ):
            assert callable(getattr(store, method))

    def test_tracker_satisfies_protocol(self) -> None:
        tracker: IdTracker = InMemoryIdTracker()
        assert callable(tracker.get_definition_id)
        assert callable(tracker.set_definition_id)


class TestDefinitions:
    """Verify definition CRUD and name uniqueness."""

    @pytest.mark.asyncio
    async def test_create_assigns_ids(self) -> None:
        store = InMemoryDefinitionStore()

        first = await store.create(Definition(name="A", editor="x"))
        second = await store.create(Definition(name="B", editor="x"))

        assert (first.id, second.id) == (1, 2)
        assert [d.name for d in await store.get_all()] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_create_rejects_duplicate_name(self) -> None:
        store = InMemoryDefinitionStore()
        await store.create(Definition(name="Tags", editor="tags"))

        with pytest.raises(ValueError, match="already exists"):
            await store.create(Definition(name="Tags", editor="other"))

    @pytest.mark.asyncio
    async def test_update_persists_changes(self) -> None:
        store = InMemoryDefinitionStore()
        created = await store.create(Definition(name="Old", editor="x"))

        created.name = "New"
        created.database_type = DatabaseType.INTEGER
        await store.update(created)

        assert await store.get_by_name("Old") is None
        fetched = await store.get_by_name("New")
        assert fetched.id == created.id
        assert fetched.database_type is DatabaseType.INTEGER

    @pytest.mark.asyncio
    async def test_update_unknown_id(self) -> None:
        store = InMemoryDefinitionStore()

        with pytest.raises(ValueError, match="No definition"):
            await store.update(Definition(id=5, name="Ghost", editor="x"))

    @pytest.mark.asyncio
    async def test_update_rejects_name_clash(self) -> None:
        store = InMemoryDefinitionStore()
        await store.create(Definition(name="A", editor="x"))
        second = await store.create(Definition(name="B", editor="x"))

        second.name = "A"
        with pytest.raises(ValueError, match="already exists"):
            await store.update(second)

    @pytest.mark.asyncio
    async def test_returned_values_are_copies(self) -> None:
        store = InMemoryDefinitionStore()
        await store.create(Definition(name="A", editor="x"))

        fetched = await store.get_by_name("A")
        fetched.name = "Changed"

        assert (await store.get_by_name("A")) is not None
        assert [d.name for d in await store.get_all()] == ["A"]


class TestPreValues:
    """Verify pre-value storage and identity."""

    @pytest.mark.asyncio
    async def test_unset_pre_values_read_as_empty(self) -> None:
        store = InMemoryDefinitionStore()
        created = await store.create(Definition(name="A", editor="x"))

        collection = await store.get_pre_values(created.id)

        assert collection.is_key_addressable is True
        assert collection.entries == {}
        assert store.has_pre_values(created.id) is False

    @pytest.mark.asyncio
    async def test_save_assigns_ids_and_order(self) -> None:
        store = InMemoryDefinitionStore()
        created = await store.create(Definition(name="A", editor="x"))

        await store.save_pre_values(
            created.id, {"a": PreValue(value="1"), "b": PreValue(value="2")}
        )

        entries = (await store.get_pre_values(created.id)).entries
        assert [(p.id, p.sort_order) for p in entries.values()] == [(1, 0), (2, 1)]

    @pytest.mark.asyncio
    async def test_save_replaces_whole_set(self) -> None:
        store = InMemoryDefinitionStore()
        created = await store.create(Definition(name="A", editor="x"))
        await store.save_pre_values(created.id, {"a": PreValue(value="1")})
        kept = (await store.get_pre_values(created.id)).entries["a"]

        await store.save_pre_values(
            created.id,
            {"a": kept.model_copy(update={"value": "9"}), "c": PreValue(value="3")},
        )

        entries = (await store.get_pre_values(created.id)).entries
        assert list(entries) == ["a", "c"]
        assert entries["a"].id == kept.id
        assert entries["a"].value == "9"

    @pytest.mark.asyncio
    async def test_new_entries_follow_highest_kept_order(self) -> None:
        store = InMemoryDefinitionStore()
        created = await store.create(Definition(name="A", editor="x"))
        await store.save_pre_values(created.id, {"a": PreValue(value="1")})
        kept = (await store.get_pre_values(created.id)).entries["a"]

        await store.save_pre_values(
            created.id,
            {
                "c": PreValue(value="3"),
                "a": kept.model_copy(update={"sort_order": 5}),
                "d": PreValue(value="4"),
            },
        )

        entries = (await store.get_pre_values(created.id)).entries
        assert {key: p.sort_order for key, p in entries.items()} == {
            "c": 6, "a": 5, "d": 7,
        }

    @pytest.mark.asyncio
    async def test_save_for_unknown_definition(self) -> None:
        store = InMemoryDefinitionStore()

        with pytest.raises(ValueError, match="No definition"):
            await store.save_pre_values(3, {})

    @pytest.mark.asyncio
    async def test_positional_seed(self) -> None:
        store = InMemoryDefinitionStore()
        created = await store.create(Definition(name="A", editor="x"))
        store.seed_positional(created.id, ["one", "two"])

        collection = await store.get_pre_values(created.id)

        assert collection.is_key_addressable is False
        assert [p.value for p in collection.items] == ["one", "two"]
        assert store.has_pre_values(created.id) is True


class TestIdTracker:
    @pytest.mark.asyncio
    async def test_unknown_id(self) -> None:
        assert await InMemoryIdTracker().get_definition_id(G1) is None

    @pytest.mark.asyncio
    async def test_set_and_overwrite(self) -> None:
        tracker = InMemoryIdTracker()

        await tracker.set_definition_id(G1, 3)
        await tracker.set_definition_id(G1, 4)

        assert await tracker.get_definition_id(G1) == 4
        assert tracker.mappings == {G1: 4}

    def test_mappings_is_a_copy(self) -> None:
        tracker = InMemoryIdTracker({G1: 1})
        tracker.mappings.clear()
        assert tracker.mappings == {G1: 1}
