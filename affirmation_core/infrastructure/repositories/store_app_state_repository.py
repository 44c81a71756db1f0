"""EmbeddedStore implementation of AppStateRepository."""

from typing import Optional

from ...core.store import NAMESPACE_APP_STATE, EmbeddedStore

CURRENT_AFFIRMATION_KEY = "current_affirmation_id"


class StoreAppStateRepository:
    """Concrete AppStateRepository backed by the ``app_state`` namespace."""

    def __init__(self, store: EmbeddedStore) -> None:
        self._store = store

    async def get_current_affirmation_id(self) -> Optional[str]:
        value = await self._store.get(NAMESPACE_APP_STATE, CURRENT_AFFIRMATION_KEY)
        return value if isinstance(value, str) and value else None

    async def set_current_affirmation_id(self, affirmation_id: str) -> None:
        await self._store.put(NAMESPACE_APP_STATE, CURRENT_AFFIRMATION_KEY, affirmation_id)

    async def clear_current_affirmation_id(self) -> None:
        await self._store.delete(NAMESPACE_APP_STATE, CURRENT_AFFIRMATION_KEY)
