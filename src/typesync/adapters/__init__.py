"""Store adapters package.

Provides the collaborator Protocols (``ModelDiscovery``,
``DefinitionStore``, ``IdTracker``) and concrete async implementations
backed by memory or PostgreSQL.

Usage:
    from typesync.adapters import DefinitionStore, InMemoryDefinitionStore
    from typesync.adapters import AsyncPostgresDefinitionStore, AsyncPostgresIdTracker
"""

from typesync.adapters.base import DefinitionStore, IdTracker, ModelDiscovery
from typesync.adapters.memory import InMemoryDefinitionStore, InMemoryIdTracker
from typesync.adapters.postgres import (
    AsyncPostgresDefinitionStore,
    AsyncPostgresIdTracker,
)

__all__ = [
    "ModelDiscovery",
    "DefinitionStore",
    "IdTracker",
    "InMemoryDefinitionStore",
    "InMemoryIdTracker",
    "AsyncPostgresDefinitionStore",
    "AsyncPostgresIdTracker",
]
