"""In-memory store and id tracker.

Dict-backed implementations of ``DefinitionStore`` and ``IdTracker``.
Every value handed out is a copy, so callers only change stored state
through the protocol methods.

Usage:
    from typesync.adapters.memory import InMemoryDefinitionStore, InMemoryIdTracker

    store = InMemoryDefinitionStore()
    tracker = InMemoryIdTracker()
    created = await store.create(Definition(name="Tags", editor="tags"))
    await tracker.set_definition_id(type_id, created.id)
"""

from uuid import UUID

from typesync.sync.models import Definition, PreValue, PreValueCollection


class InMemoryDefinitionStore:
    """In-memory implementation of the ``DefinitionStore`` protocol.

    Storage ids and pre-value ids are assigned from incrementing counters.
    Positional pre-value storage can be seeded with ``seed_positional()``.
    """

    def __init__(self) -> None:
        self._definitions: dict[int, Definition] = {}
        self._pre_values: dict[int, dict[str, PreValue]] = {}
        self._positional: dict[int, list[PreValue]] = {}
        self._next_id = 1
        self._next_pre_value_id = 1

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    async def get_all(self) -> list[Definition]:
        return [d.model_copy() for d in self._definitions.values()]

    async def create(self, definition: Definition) -> Definition:
        if self._find_by_name(definition.name) is not None:
            raise ValueError(f"Definition name already exists: {definition.name}")

        stored = definition.model_copy(update={"id": self._next_id})
        self._next_id += 1
        self._definitions[stored.id] = stored
        return stored.model_copy()

    async def update(self, definition: Definition) -> Definition:
        if definition.id not in self._definitions:
            raise ValueError(f"No definition with id {definition.id}")

        existing = self._find_by_name(definition.name)
        if existing is not None and existing.id != definition.id:
            raise ValueError(f"Definition name already exists: {definition.name}")

        stored = definition.model_copy()
        self._definitions[stored.id] = stored
        return stored.model_copy()

    async def get_by_name(self, name: str) -> Definition | None:
        found = self._find_by_name(name)
        return found.model_copy() if found is not None else None

    # ------------------------------------------------------------------
    # Pre-values
    # ------------------------------------------------------------------

    async def get_pre_values(self, definition_id: int) -> PreValueCollection:
        if definition_id in self._positional:
            return PreValueCollection(
                is_key_addressable=False,
                items=[p.model_copy() for p in self._positional[definition_id]],
            )

        entries = self._pre_values.get(definition_id, {})
        return PreValueCollection(
            entries={key: p.model_copy() for key, p in entries.items()},
        )

    async def save_pre_values(
        self, definition_id: int, pre_values: dict[str, PreValue]
    ) -> None:
        if definition_id not in self._definitions:
            raise ValueError(f"No definition with id {definition_id}")

        next_order = max(
            (p.sort_order for p in pre_values.values() if p.id is not None),
            default=-1,
        ) + 1
        stored: dict[str, PreValue] = {}
        for key, pre_value in pre_values.items():
            if pre_value.id is None:
                pre_value = pre_value.model_copy(
                    update={"id": self._next_pre_value_id, "sort_order": next_order}
                )
                self._next_pre_value_id += 1
                next_order += 1
            else:
                pre_value = pre_value.model_copy()
            stored[key] = pre_value

        self._positional.pop(definition_id, None)
        self._pre_values[definition_id] = stored

    def seed_positional(self, definition_id: int, values: list[str]) -> None:
        """Store legacy positional pre-values for a definition."""
        self._positional[definition_id] = [
            PreValue(value=value, id=None, sort_order=i)
            for i, value in enumerate(values)
        ]

    def has_pre_values(self, definition_id: int) -> bool:
        """True if pre-values were ever saved or seeded for the definition."""
        return definition_id in self._pre_values or definition_id in self._positional

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_by_name(self, name: str) -> Definition | None:
        for definition in self._definitions.values():
            if definition.name == name:
                return definition
        return None


class InMemoryIdTracker:
    """In-memory implementation of the ``IdTracker`` protocol."""

    def __init__(self, mappings: dict[UUID, int] | None = None) -> None:
        self._mappings: dict[UUID, int] = dict(mappings or {})

    async def get_definition_id(self, type_id: UUID) -> int | None:
        return self._mappings.get(type_id)

    async def set_definition_id(self, type_id: UUID, definition_id: int) -> None:
        self._mappings[type_id] = definition_id

    @property
    def mappings(self) -> dict[UUID, int]:
        """Copy of every recorded mapping."""
        return dict(self._mappings)
