"""
Encryption key management for the embedded store.

Uses Fernet symmetric encryption (AES-128-CBC with HMAC-SHA256). The key
is 32 random bytes generated on first run and kept only in the platform's
secure credential store (see ``SecretStore``); it is never written to the
data directory and never logged.
"""

import hashlib
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from ..domain.errors import DecryptionError, KeyStorageError, NotInitializedError
from ..domain.ports.secret_store import SecretStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_NAME = "store_encryption_key_v1"


class RecordCipher:
    """Ready-to-use cipher handle for record payloads."""

    __slots__ = ("_fernet", "_fingerprint")

    def __init__(self, key: bytes) -> None:
        try:
            self._fernet = Fernet(key)
        except (ValueError, TypeError) as e:
            raise KeyStorageError("Stored encryption key is malformed") from e
        # Non-secret identifier, safe to compare and log.
        self._fingerprint = hashlib.sha256(key).hexdigest()[:16]

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def encrypt(self, plaintext: bytes) -> bytes:
        return self._fernet.encrypt(plaintext)

    def decrypt(self, token: bytes) -> bytes:
        """Decrypt a payload.

        Raises:
            DecryptionError: wrong key or tampered/corrupted payload.
        """
        try:
            return self._fernet.decrypt(token)
        except InvalidToken as e:
            raise DecryptionError(
                "Stored payload could not be decrypted (wrong key or corrupted data)"
            ) from e

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordCipher):
            return NotImplemented
        return self._fingerprint == other._fingerprint

    def __hash__(self) -> int:
        return hash(self._fingerprint)

    def __repr__(self) -> str:
        return f"RecordCipher(fingerprint={self._fingerprint!r})"


class EncryptionKeyManager:
    """Owns the store key and hands out the cipher built from it.

    ``initialize`` is idempotent: repeated calls (and repeated launches)
    reuse the persisted key, so data written by an earlier launch stays
    readable.
    """

    def __init__(self, secret_store: SecretStore, key_name: str = DEFAULT_KEY_NAME) -> None:
        self._secret_store = secret_store
        self._key_name = key_name
        self._cipher: Optional[RecordCipher] = None

    @property
    def is_initialized(self) -> bool:
        return self._cipher is not None

    async def initialize(self) -> RecordCipher:
        """Load the key from secure storage, generating it on first run."""
        if self._cipher is not None:
            logger.debug("Encryption already initialized, reusing cipher")
            return self._cipher

        key = await self._secret_store.get_secret(self._key_name)
        if key is None:
            logger.info("No encryption key found, generating a new one")
            key = Fernet.generate_key().decode("ascii")
            await self._secret_store.set_secret(self._key_name, key)
        else:
            logger.debug("Retrieved existing encryption key")

        self._cipher = RecordCipher(key.encode("utf-8"))
        logger.info(f"Encryption initialized (key fingerprint {self._cipher.fingerprint})")
        return self._cipher

    def get_cipher(self) -> RecordCipher:
        """Return the cipher.

        Raises:
            NotInitializedError: ``initialize`` has not completed.
        """
        if self._cipher is None:
            raise NotInitializedError()
        return self._cipher

    async def delete_key(self) -> None:
        """Remove the key from secure storage and memory.

        All data encrypted with it becomes unrecoverable.
        """
        await self._secret_store.delete_secret(self._key_name)
        self._cipher = None
        logger.warning("Encryption key deleted")

    async def reset(self) -> RecordCipher:
        """Discard the current key and generate a new one.

        All data encrypted with the previous key becomes unrecoverable.
        """
        await self.delete_key()
        cipher = await self.initialize()
        logger.warning("Encryption reset with a new key")
        return cipher
