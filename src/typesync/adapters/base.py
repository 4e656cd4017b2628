"""Collaborator protocol definitions.

Defines the Protocols the synchronizer depends on:

- ``ModelDiscovery``: yields the desired model descriptors.
- ``DefinitionStore``: reads and writes persisted definitions and their
  pre-values.
- ``IdTracker``: remembers which definition a stable model id maps to.

All methods are ``async def`` -- the library is async-first.

Usage:
    from typesync.adapters.base import DefinitionStore

    async def rename(store: DefinitionStore, old: str, new: str) -> None:
        definition = await store.get_by_name(old)
        definition.name = new
        await store.update(definition)
"""

from typing import Protocol
from uuid import UUID

from typesync.sync.models import Definition, ModelDescriptor, PreValue, PreValueCollection


class ModelDiscovery(Protocol):
    """Source of desired model descriptors.

    Must be re-enumerable: every call returns the full batch again.
    Order is not significant.
    """

    async def get_models(self) -> list[ModelDescriptor]:
        """Return every model descriptor currently declared."""
        ...


class DefinitionStore(Protocol):
    """Persistence interface for data type definitions.

    Implementations own storage ids and enforce name uniqueness.  Errors
    are raised as-is; the synchronizer does not catch them.
    """

    async def get_all(self) -> list[Definition]:
        """Return every persisted definition."""
        ...

    async def create(self, definition: Definition) -> Definition:
        """Persist a new definition and return it with its storage id.

        Raises:
            Exception: If the name is already taken.
        """
        ...

    async def update(self, definition: Definition) -> Definition:
        """Persist changes to an existing definition (matched by ``id``)."""
        ...

    async def get_by_name(self, name: str) -> Definition | None:
        """Return the definition named *name*, or ``None``."""
        ...

    async def get_pre_values(self, definition_id: int) -> PreValueCollection:
        """Return the stored pre-values for a definition.

        Example:
            collection = await store.get_pre_values(12)
            if collection.is_key_addressable:
                print(collection.as_dict())
        """
        ...

    async def save_pre_values(
        self, definition_id: int, pre_values: dict[str, PreValue]
    ) -> None:
        """Replace the complete pre-value set of a definition.

        Entries carrying an ``id`` keep their stored identity; entries
        without one are new.  Stored entries not present are removed.
        """
        ...


class IdTracker(Protocol):
    """Persistent mapping from stable model id to storage id."""

    async def get_definition_id(self, type_id: UUID) -> int | None:
        """Return the storage id recorded for *type_id*, or ``None``."""
        ...

    async def set_definition_id(self, type_id: UUID, definition_id: int) -> None:
        """Record (or overwrite) the storage id for *type_id*."""
        ...
