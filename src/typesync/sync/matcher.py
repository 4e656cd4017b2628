"""Definition matching.

Pairs a model descriptor with the persisted definition it describes.
Pure logic -- no I/O; the caller supplies the id tracker's answer.

Matching order, first non-empty result wins:

1. Tracked id: the model declares an ``id``, the id tracker maps it to a
   storage id, and a definition with that storage id exists.
2. Name and editor: exact, case-sensitive ``name`` plus equal ``editor``.

Usage:
    from typesync.sync.matcher import find_definition

    tracked = await id_tracker.get_definition_id(model.id)
    definition = find_definition(model, definitions, tracked_id=tracked)
"""

from collections.abc import Sequence

from typesync.sync.errors import AmbiguousMatchError
from typesync.sync.models import Definition, ModelDescriptor


def find_definitions(
    model: ModelDescriptor,
    definitions: Sequence[Definition],
    tracked_id: int | None = None,
) -> list[Definition]:
    """Return every definition that corresponds to *model*.

    The id match, when it applies, shadows name matching entirely.

    Args:
        model: The desired model.
        definitions: Snapshot of all persisted definitions.
        tracked_id: Storage id the id tracker holds for ``model.id``, if any.

    Returns:
        Zero or more matching definitions.

    Examples:
        >>> defs = [Definition(id=1, name="Tags", editor="tags")]
        >>> model = ModelDescriptor(name="Tags", editor="tags")
        >>> [d.id for d in find_definitions(model, defs)]
        [1]
    """
    if model.id is not None and tracked_id is not None:
        by_id = [d for d in definitions if d.id == tracked_id]
        if by_id:
            return by_id

    return [
        d for d in definitions
        if d.name == model.name and d.editor == model.editor
    ]


def find_definition(
    model: ModelDescriptor,
    definitions: Sequence[Definition],
    tracked_id: int | None = None,
) -> Definition | None:
    """Return the single definition matching *model*, or ``None``.

    Raises:
        AmbiguousMatchError: If more than one definition matches.
    """
    matches = find_definitions(model, definitions, tracked_id)

    if len(matches) > 1:
        ids = ", ".join(str(d.id) for d in matches)
        raise AmbiguousMatchError(
            [f"Model {model.label} matches {len(matches)} definitions (ids: {ids})"]
        )

    return matches[0] if matches else None
