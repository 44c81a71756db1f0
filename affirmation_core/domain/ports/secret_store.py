"""SecretStore port -- abstracts the platform's secure credential area."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class SecretStore(Protocol):
    """Named secrets kept outside the application's data directory.

    Implementations must never write secrets to plain disk.
    """

    async def get_secret(self, name: str) -> Optional[str]: ...

    async def set_secret(self, name: str, value: str) -> None: ...

    async def delete_secret(self, name: str) -> None: ...
