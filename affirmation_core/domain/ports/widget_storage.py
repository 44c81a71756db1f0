"""Widget ports -- the cross-process area and the renderer refresh signal."""

from typing import Any, Dict, Mapping, Protocol, runtime_checkable


@runtime_checkable
class WidgetStorage(Protocol):
    """Key/value area readable by the companion renderer.

    ``replace`` swaps the whole document in one step so a renderer never
    observes a half-written snapshot.
    """

    async def replace(self, values: Mapping[str, Any]) -> None: ...

    async def read(self) -> Dict[str, Any]: ...

    async def clear(self) -> None: ...


@runtime_checkable
class WidgetRefresher(Protocol):
    """Fire-and-forget request for the renderer to redraw."""

    async def request_refresh(self) -> None: ...
