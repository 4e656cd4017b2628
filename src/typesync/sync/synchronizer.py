"""Data type synchronization (async).

Reconciles code-declared data types against the definitions persisted in a
``DefinitionStore``.  A run is sequential and happens in two phases:

1. **Plan** (no writes): discover models, validate the batch, fetch every
   definition once and match each model in turn against that snapshot.  A
   matched definition takes its model's name, editor and type before the
   next model is matched, so a renamed type frees its old name.  Any
   configuration conflict aborts here.
2. **Apply**: per model, create or update the definition, re-fetch it by
   name, reconcile pre-values and record the stable id mapping.

Store errors during apply propagate unchanged and stop the batch.
Definitions already written stay written.

Usage:
    from typesync.sync.synchronizer import DataTypeSynchronizer

    synchronizer = DataTypeSynchronizer(discovery, store, id_tracker)

    # Inspect what would change
    plan = await synchronizer.plan()
    for item in plan.items:
        print(item.action, item.model.name)

    # Apply
    result = await synchronizer.run()
"""

import logging
from datetime import date
from typing import TYPE_CHECKING

from typesync.sync.errors import AmbiguousMatchError, DefinitionNotFoundError
from typesync.sync.matcher import find_definitions
from typesync.sync.models import (
    DatabaseType,
    Definition,
    ModelDescriptor,
    PlannedSync,
    SyncPlan,
    SyncResult,
)
from typesync.sync.prevalues import PreValueReconciler
from typesync.sync.validator import validate_models

if TYPE_CHECKING:
    from typesync.adapters.base import DefinitionStore, IdTracker, ModelDiscovery

logger = logging.getLogger(__name__)


def get_database_type(value_type: object) -> DatabaseType:
    """Derive the storage representation for a declared value type.

    ``int`` maps to ``INTEGER`` and ``datetime``/``date`` to ``DATE``.
    Everything else, including ``bool``, falls back to ``LONG_TEXT``.

    Examples:
        >>> get_database_type(int)
        <DatabaseType.INTEGER: 'integer'>
        >>> get_database_type(bool)
        <DatabaseType.LONG_TEXT: 'ntext'>
    """
    if value_type is int:
        return DatabaseType.INTEGER
    if isinstance(value_type, type) and issubclass(value_type, date):
        return DatabaseType.DATE
    return DatabaseType.LONG_TEXT


class DataTypeSynchronizer:
    """Synchronizes model types declared with ``@data_type``.

    Args:
        discovery: Source of model descriptors.
        store: Persistence for definitions and pre-values.
        id_tracker: Stable id to storage id mapping.

    Raises:
        ValueError: If a collaborator is missing.
    """

    def __init__(
        self,
        discovery: "ModelDiscovery",
        store: "DefinitionStore",
        id_tracker: "IdTracker",
    ) -> None:
        if discovery is None:
            raise ValueError("discovery is required")
        if store is None:
            raise ValueError("store is required")
        if id_tracker is None:
            raise ValueError("id_tracker is required")

        self._discovery = discovery
        self._store = store
        self._id_tracker = id_tracker
        self._pre_values = PreValueReconciler(store)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> SyncResult:
        """Synchronize every discovered model.

        Returns:
            ``SyncResult`` naming the created and updated definitions.

        Raises:
            BatchValidationError: If models in the batch conflict.
            AmbiguousMatchError: If a model cannot be matched unambiguously.
            DefinitionNotFoundError: If a saved definition cannot be re-fetched.
        """
        result = SyncResult()

        models = list(await self._discovery.get_models())
        if not models:
            logger.debug("No data types declared, nothing to synchronize")
            return result

        plan = await self._plan(models)

        for item in plan.items:
            await self._synchronize(item, result)

        logger.info(
            "Data types synchronized: %d created, %d updated",
            len(result.created),
            len(result.updated),
        )
        return result

    async def plan(self) -> SyncPlan:
        """Match every discovered model without writing anything.

        Raises:
            BatchValidationError: If models in the batch conflict.
            AmbiguousMatchError: If a model cannot be matched unambiguously.
        """
        models = list(await self._discovery.get_models())
        if not models:
            return SyncPlan()
        return await self._plan(models)

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    async def _plan(self, models: list[ModelDescriptor]) -> SyncPlan:
        validate_models(models).raise_for_issues()

        # Claimed definitions take their model's values before the next
        # model is matched, as an in-place update would leave them.
        definitions = [d.model_copy() for d in await self._store.get_all()]

        items: list[PlannedSync] = []
        conflicts: list[str] = []
        claimed: dict[int, ModelDescriptor] = {}

        for model in models:
            tracked_id = None
            if model.id is not None:
                tracked_id = await self._id_tracker.get_definition_id(model.id)

            matches = find_definitions(model, definitions, tracked_id)

            if len(matches) > 1:
                ids = ", ".join(str(d.id) for d in matches)
                conflicts.append(
                    f"Model {model.label} matches {len(matches)} definitions (ids: {ids})"
                )
                continue

            if not matches:
                items.append(PlannedSync(model=model))
                continue

            definition = matches[0]
            other = claimed.get(definition.id)
            if other is not None:
                conflicts.append(
                    f"Models {other.label} and {model.label} both match "
                    f"definition {definition.id} ('{definition.name}')"
                )
                continue
            claimed[definition.id] = model
            self._update_definition(definition, model)

            matched_by = "id" if definition.id == tracked_id else "name"
            logger.debug(
                "Model %s matched definition %s by %s",
                model.label,
                definition.id,
                matched_by,
            )
            items.append(
                PlannedSync(model=model, definition=definition, matched_by=matched_by)
            )

        if conflicts:
            raise AmbiguousMatchError(conflicts)

        return SyncPlan(items=items)

    # ------------------------------------------------------------------
    # Applying
    # ------------------------------------------------------------------

    async def _synchronize(self, item: PlannedSync, result: SyncResult) -> None:
        model = item.model
        create_new = item.definition is None

        if create_new:
            definition = self._create_definition(model)
            await self._store.create(definition)
        else:
            await self._store.update(item.definition)

        # The store may fill in defaults on save; use what it persisted.
        saved = await self._store.get_by_name(model.name)
        if saved is None or saved.id is None:
            raise DefinitionNotFoundError(
                f"Definition '{model.name}' not found after saving"
            )

        if create_new:
            logger.info("Created data type '%s' (id=%s)", saved.name, saved.id)
            await self._pre_values.initial(saved.id, model.pre_values)
            result.created.append(saved.name)
        else:
            logger.info("Updated data type '%s' (id=%s)", saved.name, saved.id)
            await self._pre_values.merge(saved.id, model.pre_values)
            result.updated.append(saved.name)

        if model.id is not None:
            await self._id_tracker.set_definition_id(model.id, saved.id)
            result.mapped += 1

    def _create_definition(self, model: ModelDescriptor) -> Definition:
        return Definition(
            name=model.name,
            editor=model.editor,
            database_type=get_database_type(model.value_type),
        )

    def _update_definition(
        self, definition: Definition, model: ModelDescriptor
    ) -> Definition:
        definition.name = model.name
        definition.editor = model.editor
        definition.database_type = get_database_type(model.value_type)
        return definition
