"""Pre-value reconciliation.

Two entry points, one per synchronizer branch:

- ``initial``: the definition was just created.  Always writes, so a new
  definition never ends up with unset pre-values.
- ``merge``: the definition already existed.  The desired map is the full
  authoritative set; stored entries keep their identity, only the value
  changes.  Keys not in the desired map are dropped.

Neither path invents ids or sort orders beyond what the store returns.
"""

import logging
from typing import TYPE_CHECKING

from typesync.sync.models import PreValue

if TYPE_CHECKING:
    from typesync.adapters.base import DefinitionStore

logger = logging.getLogger(__name__)


class PreValueReconciler:
    """Writes pre-values through a ``DefinitionStore``."""

    def __init__(self, store: "DefinitionStore") -> None:
        if store is None:
            raise ValueError("store is required")
        self._store = store

    async def initial(
        self, definition_id: int, desired: dict[str, str] | None
    ) -> None:
        """Set pre-values on a newly created definition.

        ``None`` and ``{}`` both persist an explicit empty set.
        """
        if not desired:
            await self._store.save_pre_values(definition_id, {})
            return

        pre_values = {key: PreValue(value=value) for key, value in desired.items()}
        await self._store.save_pre_values(definition_id, pre_values)

    async def merge(
        self, definition_id: int, desired: dict[str, str] | None
    ) -> None:
        """Reconcile pre-values on an existing definition.

        - ``None``: nothing is read or written.
        - Positional (non key-addressable) storage: read only, never written.
        - Otherwise the saved set holds exactly the keys of *desired*.
        """
        if desired is None:
            return

        existing = await self._store.get_pre_values(definition_id)

        if not existing.is_key_addressable:
            logger.debug(
                "Definition %s stores positional pre-values; leaving them as they are",
                definition_id,
            )
            return

        pre_values: dict[str, PreValue] = {}
        for key, value in desired.items():
            current = existing.entries.get(key)
            if current is None:
                pre_values[key] = PreValue(value=value)
            else:
                pre_values[key] = current.model_copy(update={"value": value})

        dropped = sorted(set(existing.entries) - set(desired))
        if dropped:
            logger.debug(
                "Dropping pre-values %s from definition %s", dropped, definition_id
            )

        await self._store.save_pre_values(definition_id, pre_values)
