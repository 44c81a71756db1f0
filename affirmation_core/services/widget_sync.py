"""
Widget synchronization bridge.

Keeps the cross-process area in step with the store. Every sync rebuilds
the snapshot from the repositories (never patches the previous one),
replaces the shared document in one step and asks the renderer to
redraw. Syncing is best effort: a failure is logged and reported as
``False`` but never reaches the operation that triggered it. Event-driven
syncs run as background tasks; ``drain`` waits for them.
"""

import asyncio
from typing import Optional, Set

from ..domain.events import STATE_EVENTS, EventBus, StateChanged
from ..domain.ports import WidgetRefresher, WidgetStorage
from ..domain.repositories import AffirmationRepository, AppStateRepository, SettingsRepository
from ..models.affirmation import utcnow
from ..models.widget_snapshot import WidgetSnapshot
from ..utils.logging import SyncLogContext, get_sync_logger

logger = get_sync_logger()


class WidgetSyncBridge:
    def __init__(
        self,
        affirmations: AffirmationRepository,
        settings: SettingsRepository,
        app_state: AppStateRepository,
        storage: WidgetStorage,
        refresher: Optional[WidgetRefresher] = None,
    ) -> None:
        self._affirmations = affirmations
        self._settings = settings
        self._app_state = app_state
        self._storage = storage
        self._refresher = refresher
        self._lock = asyncio.Lock()
        self._last_snapshot: Optional[WidgetSnapshot] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def last_snapshot(self) -> Optional[WidgetSnapshot]:
        """Snapshot written by the last successful sync."""
        return self._last_snapshot

    def register(self, bus: EventBus) -> None:
        """Subscribe to every state-changing event."""
        for event_type in STATE_EVENTS:
            bus.subscribe(event_type, self.on_state_changed)

    def unregister(self, bus: EventBus) -> None:
        for event_type in STATE_EVENTS:
            bus.unsubscribe(event_type, self.on_state_changed)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def on_state_changed(self, event: StateChanged) -> None:
        """Schedule a sync and return without waiting for it."""
        reason = type(event).__name__
        task = asyncio.create_task(self.sync(reason=reason), name=f"widget_sync:{reason}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for scheduled syncs to finish.

        Syncs still running after *timeout* seconds are cancelled.
        """
        while self._pending:
            tasks = list(self._pending)
            try:
                await asyncio.wait_for(asyncio.gather(*tasks, return_exceptions=True), timeout)
            except asyncio.TimeoutError:
                logger.warning("Timed out waiting for widget syncs", pending=len(self._pending))
                return

    async def build_snapshot(self) -> WidgetSnapshot:
        """Derive the snapshot from current store state."""
        active = await self._affirmations.get_active()
        settings = await self._settings.get_settings()
        current_id = await self._app_state.get_current_affirmation_id()
        current = next((a for a in active if a.id == current_id), None)
        return WidgetSnapshot.build(active, current, settings, last_update=utcnow())

    async def sync(self, reason: str = "manual") -> bool:
        """Rebuild and publish the mirror. Returns False on any failure."""
        async with self._lock:
            try:
                with SyncLogContext("widget_sync", logger, reason=reason) as log_ctx:
                    snapshot = await self.build_snapshot()
                    log_ctx.add(
                        affirmations_count=len(snapshot.affirmations),
                        has_current=snapshot.current_affirmation_id is not None,
                    )
                    await self._storage.replace(snapshot.to_shared_values())
                    if self._refresher is not None:
                        await self._refresher.request_refresh()
            except Exception:
                # Already logged by SyncLogContext.
                return False
            self._last_snapshot = snapshot
            return True

    async def clear(self) -> bool:
        """Remove all mirrored data (e.g. on reset)."""
        async with self._lock:
            try:
                with SyncLogContext("widget_clear", logger):
                    await self._storage.clear()
                    if self._refresher is not None:
                        await self._refresher.request_refresh()
            except Exception:
                return False
            self._last_snapshot = None
            return True
