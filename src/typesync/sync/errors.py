"""Exceptions raised by data type synchronization.

Configuration errors are detected before any write and abort the run.
Store errors are never wrapped; they reach the caller unmodified.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typesync.sync.models import BatchValidationResult


class SyncError(Exception):
    """Base class for synchronization errors."""

    pass


class ConfigurationError(SyncError):
    """Declared models conflict with each other or with the store."""

    pass


class BatchValidationError(ConfigurationError):
    """Raised when batch validation finds one or more conflicts.

    The full ``BatchValidationResult`` is kept on ``result`` so callers can
    report every violation at once.
    """

    def __init__(self, result: "BatchValidationResult") -> None:
        self.result = result
        super().__init__(result.format_report())


class AmbiguousMatchError(ConfigurationError):
    """Raised when a model matches more than one definition, or when two
    models resolve to the same definition."""

    def __init__(self, conflicts: list[str]) -> None:
        self.conflicts = conflicts
        lines = [f"Ambiguous definition match ({len(conflicts)}):"]
        lines.extend(f"  - {conflict}" for conflict in conflicts)
        super().__init__("\n".join(lines))


class DefinitionNotFoundError(SyncError, LookupError):
    """Raised when a definition cannot be re-fetched after it was saved."""

    pass
