"""AppStateRepository protocol — small pieces of runtime state that outlive a launch."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class AppStateRepository(Protocol):
    """Tracks the affirmation currently shown to the user."""

    async def get_current_affirmation_id(self) -> Optional[str]: ...

    async def set_current_affirmation_id(self, affirmation_id: str) -> None: ...

    async def clear_current_affirmation_id(self) -> None: ...
