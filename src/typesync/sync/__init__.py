"""Data type synchronization: matching, validation and reconciliation.

Provides batch validation (``validate_models``), definition matching
(``find_definition``), pre-value reconciliation (``PreValueReconciler``)
and the orchestrating ``DataTypeSynchronizer``.

Usage:
    from typesync.sync import DataTypeSynchronizer, validate_models
    from typesync.sync import find_definition, get_database_type
"""

from typesync.sync.errors import (
    AmbiguousMatchError,
    BatchValidationError,
    ConfigurationError,
    DefinitionNotFoundError,
    SyncError,
)
from typesync.sync.matcher import find_definition, find_definitions
from typesync.sync.models import (
    BatchValidationResult,
    DatabaseType,
    Definition,
    ModelDescriptor,
    PlannedSync,
    PreValue,
    PreValueCollection,
    SyncPlan,
    SyncResult,
    ValidationIssue,
)
from typesync.sync.prevalues import PreValueReconciler
from typesync.sync.synchronizer import DataTypeSynchronizer, get_database_type
from typesync.sync.validator import validate_models

__all__ = [
    "DataTypeSynchronizer",
    "get_database_type",
    "PreValueReconciler",
    "validate_models",
    "find_definition",
    "find_definitions",
    "ModelDescriptor",
    "DatabaseType",
    "Definition",
    "PreValue",
    "PreValueCollection",
    "ValidationIssue",
    "BatchValidationResult",
    "PlannedSync",
    "SyncPlan",
    "SyncResult",
    "SyncError",
    "ConfigurationError",
    "BatchValidationError",
    "AmbiguousMatchError",
    "DefinitionNotFoundError",
]
