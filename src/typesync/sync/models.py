"""Pydantic models for data type synchronization.

This module contains the sync-domain models:
- Desired state: ModelDescriptor
- Persisted state: DatabaseType, Definition, PreValue, PreValueCollection
- Results: ValidationIssue, BatchValidationResult, PlannedSync, SyncPlan,
  SyncResult

Configuration models (StoreConfig, SyncConfig) live in
typesync.config.models.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Desired State
# ============================================================================


class ModelDescriptor(BaseModel):
    """Code-declared intent for one data type definition.

    ``pre_values`` is tri-state: ``None`` leaves stored pre-values alone,
    ``{}`` clears them, anything else is the full authoritative set.

    Example:
        >>> model = ModelDescriptor(name="Color Picker", editor="colorpicker.editor")
        >>> model.value_type
        <class 'str'>
        >>> model.pre_values is None
        True
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    editor: str = Field(min_length=1)
    value_type: type = str
    id: UUID | None = None
    pre_values: dict[str, str] | None = None
    source_type: type | None = None  # Decorated class, diagnostics only

    @property
    def label(self) -> str:
        """Name used in log lines and reports."""
        if self.id is None:
            return f"'{self.name}' ({self.editor})"
        return f"'{self.name}' ({self.editor}, id={self.id})"


# ============================================================================
# Persisted State
# ============================================================================


class DatabaseType(str, Enum):
    """Storage representation of a definition's values."""

    INTEGER = "integer"
    DATE = "date"
    LONG_TEXT = "ntext"


class Definition(BaseModel):
    """A persisted data type definition owned by the store.

    ``id`` is ``None`` until the store has created the record.
    """

    id: int | None = None
    name: str
    editor: str
    database_type: DatabaseType = DatabaseType.LONG_TEXT


class PreValue(BaseModel):
    """One pre-value entry.

    ``id`` and ``sort_order`` belong to the store; callers only change
    ``value``.
    """

    value: str
    id: int | None = None
    sort_order: int = 0


class PreValueCollection(BaseModel):
    """Pre-values stored for a definition.

    Key-addressable storage fills ``entries``; legacy positional storage
    fills ``items`` and sets ``is_key_addressable`` to ``False``.
    """

    is_key_addressable: bool = True
    entries: dict[str, PreValue] = Field(default_factory=dict)
    items: list[PreValue] = Field(default_factory=list)

    def as_dict(self) -> dict[str, str]:
        """Plain ``{key: value}`` view of key-addressable entries."""
        return {key: pre_value.value for key, pre_value in self.entries.items()}


# ============================================================================
# Validation Result Models
# ============================================================================


class ValidationIssue(BaseModel):
    """A conflict between models in one batch."""

    kind: str  # duplicate_id, duplicate_name
    message: str
    models: list[str] = Field(default_factory=list)


class BatchValidationResult(BaseModel):
    """Result of batch validation.

    Example:
        >>> result = BatchValidationResult(valid=True)
        >>> result.error_count
        0
        >>> result.format_report()
        'Models valid'
    """

    valid: bool
    model_count: int = 0
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        """Number of conflicts found."""
        return len(self.issues)

    def format_report(self) -> str:
        """Format validation result as human-readable report."""
        if self.valid:
            return "Models valid"

        lines = [f"Model validation failed ({self.error_count} issues):"]
        for issue in self.issues:
            lines.append(f"  - {issue.message}")
        return "\n".join(lines)

    def raise_for_issues(self) -> None:
        """Raise ``BatchValidationError`` if any issue was found."""
        if not self.valid:
            from typesync.sync.errors import BatchValidationError

            raise BatchValidationError(self)


# ============================================================================
# Plan and Run Results
# ============================================================================


class PlannedSync(BaseModel):
    """One model paired with the definition it will update, if any."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: ModelDescriptor
    definition: Definition | None = None
    matched_by: str | None = None  # "id" or "name"

    @property
    def action(self) -> str:
        """``"create"`` or ``"update"``."""
        return "create" if self.definition is None else "update"


class SyncPlan(BaseModel):
    """Matches for a whole batch, computed before any write."""

    items: list[PlannedSync] = Field(default_factory=list)

    @property
    def creates(self) -> list[PlannedSync]:
        return [item for item in self.items if item.action == "create"]

    @property
    def updates(self) -> list[PlannedSync]:
        return [item for item in self.items if item.action == "update"]


class SyncResult(BaseModel):
    """Summary of a completed run.

    Attributes:
        created: Names of definitions created.
        updated: Names of definitions updated.
        mapped: Number of id mappings written.
    """

    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    mapped: int = 0

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated)
