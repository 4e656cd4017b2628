"""typesync: Synchronize code-declared data types into a CMS store.

Application code declares data types with ``@data_type``; the
``DataTypeSynchronizer`` creates or updates the matching persisted
definitions, reconciles their pre-values and tracks stable ids across
renames.  Stores are pluggable async Protocols (in-memory and PostgreSQL
ship with the package).

Usage:
    from typesync import data_type, DataTypeSynchronizer, TypeResolver
    from typesync import InMemoryDefinitionStore, InMemoryIdTracker
    from typesync import load_config, build_startup
"""

__version__ = "0.1.0"

# Adapters
from typesync.adapters.base import DefinitionStore, IdTracker, ModelDiscovery
from typesync.adapters.memory import InMemoryDefinitionStore, InMemoryIdTracker
from typesync.adapters.postgres import (
    AsyncPostgresDefinitionStore,
    AsyncPostgresIdTracker,
)

# Config
from typesync.config.loader import load_config, resolve_url
from typesync.config.models import StoreConfig, SyncConfig, SynchronizationMode

# Discovery
from typesync.discovery import StaticDiscovery, TypeResolver, data_type, describe

# Sync
from typesync.sync.errors import (
    AmbiguousMatchError,
    BatchValidationError,
    ConfigurationError,
    DefinitionNotFoundError,
    SyncError,
)
from typesync.sync.models import (
    DatabaseType,
    Definition,
    ModelDescriptor,
    PreValue,
    PreValueCollection,
    SyncResult,
)
from typesync.sync.synchronizer import DataTypeSynchronizer, get_database_type
from typesync.sync.validator import validate_models

# Startup
from typesync.startup import StartupSynchronizer, build_startup

__all__ = [
    # Adapters
    "ModelDiscovery",
    "DefinitionStore",
    "IdTracker",
    "InMemoryDefinitionStore",
    "InMemoryIdTracker",
    "AsyncPostgresDefinitionStore",
    "AsyncPostgresIdTracker",
    # Config
    "load_config",
    "resolve_url",
    "SyncConfig",
    "StoreConfig",
    "SynchronizationMode",
    # Discovery
    "data_type",
    "describe",
    "TypeResolver",
    "StaticDiscovery",
    # Sync
    "DataTypeSynchronizer",
    "get_database_type",
    "validate_models",
    "ModelDescriptor",
    "Definition",
    "DatabaseType",
    "PreValue",
    "PreValueCollection",
    "SyncResult",
    "SyncError",
    "ConfigurationError",
    "BatchValidationError",
    "AmbiguousMatchError",
    "DefinitionNotFoundError",
    # Startup
    "StartupSynchronizer",
    "build_startup",
]
