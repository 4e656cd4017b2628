"""Application startup wiring.

``StartupSynchronizer`` is the host-owned run-once gate: duplicate start
signals, from any thread or event loop, synchronize at most once per
process.  The enabled
``SynchronizationMode`` members decide which synchronizers run, always in
the order data types, document types, media types, member types.

Only the data type synchronizer ships with typesync.  Synchronizers for the
other schema kinds plug in through the ``Synchronizer`` protocol.

Usage:
    from typesync.startup import build_startup

    startup = build_startup(config, store, id_tracker)
    await startup.on_application_started()
"""

import asyncio
import logging
import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from typesync.config.models import SyncConfig, SynchronizationMode
from typesync.discovery import TypeResolver
from typesync.sync.synchronizer import DataTypeSynchronizer

if TYPE_CHECKING:
    from typesync.adapters.base import DefinitionStore, IdTracker, ModelDiscovery

logger = logging.getLogger(__name__)

RUN_ORDER: tuple[SynchronizationMode, ...] = (
    SynchronizationMode.DATA_TYPES,
    SynchronizationMode.DOCUMENT_TYPES,
    SynchronizationMode.MEDIA_TYPES,
    SynchronizationMode.MEMBER_TYPES,
)


class Synchronizer(Protocol):
    """Anything that can synchronize one schema kind."""

    async def run(self) -> Any:
        ...


class StartupSynchronizer:
    """Runs the enabled synchronizers once.

    The gate is safe to share between threads and event loops.  The first
    caller claims the run under a ``threading.Lock``; every other caller
    waits for that run to finish without blocking its own event loop.  The
    host creates one gate per process, so synchronization happens at most
    once per process lifetime.

    Args:
        modes: Enabled schema kinds.
        synchronizers: Synchronizer per schema kind.  An enabled mode
            without a synchronizer is logged and skipped.
    """

    def __init__(
        self,
        modes: SynchronizationMode,
        synchronizers: Mapping[SynchronizationMode, Synchronizer],
    ) -> None:
        self._modes = modes
        self._synchronizers = dict(synchronizers)
        self._lock = threading.Lock()
        self._running: threading.Event | None = None
        self._configured = False

    @property
    def configured(self) -> bool:
        with self._lock:
            return self._configured

    async def on_application_started(self) -> bool:
        """Synchronize unless it already happened.

        Returns:
            ``True`` if this call ran the synchronizers, ``False`` if another
            call already did.

        A caller arriving while a run is in progress waits for it.  A
        synchronizer error propagates to the caller that ran it and leaves
        the gate unconfigured; a waiting caller then claims a new run.
        """
        while True:
            with self._lock:
                if self._configured:
                    return False
                running = self._running
                if running is None:
                    self._running = threading.Event()
                    break
            await asyncio.to_thread(running.wait)

        succeeded = False
        try:
            await self._run_enabled()
            succeeded = True
        finally:
            with self._lock:
                self._configured = succeeded
                running, self._running = self._running, None
            running.set()

        return True

    async def _run_enabled(self) -> None:
        logger.info("Begin synchronizing types.")

        for mode in RUN_ORDER:
            if mode not in self._modes:
                continue

            synchronizer = self._synchronizers.get(mode)
            if synchronizer is None:
                logger.warning(
                    "%s synchronization enabled but no synchronizer registered",
                    mode.name.lower(),
                )
                continue

            logger.info(
                "%s synchronization enabled. Begin synchronizing.",
                mode.name.lower(),
            )
            await synchronizer.run()

        logger.info("Types synchronized.")


def build_startup(
    config: SyncConfig,
    store: "DefinitionStore",
    id_tracker: "IdTracker",
    discovery: "ModelDiscovery | None" = None,
    extra: Mapping[SynchronizationMode, Synchronizer] | None = None,
) -> StartupSynchronizer:
    """Wire a ``StartupSynchronizer`` from configuration.

    Args:
        config: Loaded configuration.
        store: Definition store.
        id_tracker: Id tracker.
        discovery: Model discovery.  Defaults to a ``TypeResolver`` over
            ``config.modules``.
        extra: Synchronizers for the other schema kinds.
    """
    if discovery is None:
        discovery = TypeResolver(config.modules)

    synchronizers: dict[SynchronizationMode, Synchronizer] = dict(extra or {})
    synchronizers[SynchronizationMode.DATA_TYPES] = DataTypeSynchronizer(
        discovery, store, id_tracker
    )
    return StartupSynchronizer(config.modes, synchronizers)
