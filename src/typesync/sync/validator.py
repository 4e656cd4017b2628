"""Batch validation of model descriptors.

Finds conflicts between models declared in the same batch before the
synchronizer touches the store. Pure logic -- no I/O.

Checks:
- Duplicate stable ids: two models claim the same ``id``.
- Duplicate name/editor pairs: two models would match the same definition
  by name, so one would overwrite the other.

Usage:
    from typesync.sync.validator import validate_models

    result = validate_models(models)
    if not result.valid:
        print(result.format_report())
"""

from collections import defaultdict
from collections.abc import Iterable
from uuid import UUID

from typesync.sync.models import (
    BatchValidationResult,
    ModelDescriptor,
    ValidationIssue,
)


def validate_models(models: Iterable[ModelDescriptor]) -> BatchValidationResult:
    """Validate a batch of models against each other.

    Every violation is reported, not only the first.

    Args:
        models: The batch to validate.

    Returns:
        ``BatchValidationResult`` with ``valid`` set when no issue was found.

    Examples:
        >>> result = validate_models([
        ...     ModelDescriptor(name="Tags", editor="tags"),
        ...     ModelDescriptor(name="Tags", editor="tags"),
        ... ])
        >>> result.valid
        False
        >>> result.issues[0].kind
        'duplicate_name'
    """
    models = list(models)

    by_id: dict[UUID, list[ModelDescriptor]] = defaultdict(list)
    by_name: dict[tuple[str, str], list[ModelDescriptor]] = defaultdict(list)

    for model in models:
        if model.id is not None:
            by_id[model.id].append(model)
        by_name[(model.name, model.editor)].append(model)

    issues: list[ValidationIssue] = []

    for type_id, group in by_id.items():
        if len(group) > 1:
            issues.append(
                ValidationIssue(
                    kind="duplicate_id",
                    message=(
                        f"Id {type_id} is declared by {len(group)} models: "
                        f"{', '.join(_describe(m) for m in group)}"
                    ),
                    models=[m.name for m in group],
                )
            )

    for (name, editor), group in by_name.items():
        if len(group) > 1:
            issues.append(
                ValidationIssue(
                    kind="duplicate_name",
                    message=(
                        f"Name '{name}' with editor '{editor}' is declared by "
                        f"{len(group)} models: "
                        f"{', '.join(_describe(m) for m in group)}"
                    ),
                    models=[m.name for m in group],
                )
            )

    return BatchValidationResult(
        valid=not issues,
        model_count=len(models),
        issues=issues,
    )


def _describe(model: ModelDescriptor) -> str:
    if model.source_type is not None:
        return model.source_type.__qualname__
    return f"'{model.name}'"
