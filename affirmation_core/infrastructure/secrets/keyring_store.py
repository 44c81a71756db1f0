"""SecretStore backed by the OS keyring (Keychain, Secret Service, Credential Manager)."""

import asyncio
import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ...domain.errors import KeyStorageError

logger = logging.getLogger(__name__)

SERVICE_NAME = "affirmation_core"


class KeyringSecretStore:
    """Concrete SecretStore using the ``keyring`` library.

    keyring calls block (D-Bus, Keychain prompts), so they run in a worker
    thread.
    """

    def __init__(self, service_name: str = SERVICE_NAME) -> None:
        self._service_name = service_name

    @property
    def service_name(self) -> str:
        return self._service_name

    async def get_secret(self, name: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(keyring.get_password, self._service_name, name)
        except KeyringError as e:
            raise KeyStorageError(f"Could not read secret '{name}' from keyring: {e}") from e

    async def set_secret(self, name: str, value: str) -> None:
        try:
            await asyncio.to_thread(keyring.set_password, self._service_name, name, value)
        except KeyringError as e:
            raise KeyStorageError(f"Could not write secret '{name}' to keyring: {e}") from e
        logger.debug(f"Stored secret '{name}' in keyring service '{self._service_name}'")

    async def delete_secret(self, name: str) -> None:
        try:
            await asyncio.to_thread(keyring.delete_password, self._service_name, name)
        except PasswordDeleteError:
            logger.debug(f"Secret '{name}' was not present in keyring")
        except KeyringError as e:
            raise KeyStorageError(f"Could not delete secret '{name}' from keyring: {e}") from e
