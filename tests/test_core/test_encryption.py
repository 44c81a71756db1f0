"""Tests for the encryption key manager and record cipher."""

import logging

import pytest
from cryptography.fernet import Fernet

from affirmation_core.core.encryption import DEFAULT_KEY_NAME, EncryptionKeyManager, RecordCipher
from affirmation_core.domain.errors import DecryptionError, KeyStorageError, NotInitializedError


class TestRecordCipher:
    def test_encrypt_decrypt(self):
        cipher = RecordCipher(Fernet.generate_key())
        token = cipher.encrypt(b"I am capable")
        assert token != b"I am capable"
        assert cipher.decrypt(token) == b"I am capable"

    def test_wrong_key_raises_decryption_error(self):
        token = RecordCipher(Fernet.generate_key()).encrypt(b"secret")
        with pytest.raises(DecryptionError):
            RecordCipher(Fernet.generate_key()).decrypt(token)

    def test_tampered_payload_raises_decryption_error(self):
        cipher = RecordCipher(Fernet.generate_key())
        with pytest.raises(DecryptionError):
            cipher.decrypt(b"not a fernet token")

    def test_malformed_key(self):
        with pytest.raises(KeyStorageError):
            RecordCipher(b"too-short")

    def test_equality_by_key(self):
        key = Fernet.generate_key()
        assert RecordCipher(key) == RecordCipher(key)
        assert RecordCipher(key) != RecordCipher(Fernet.generate_key())
        assert key.decode() not in repr(RecordCipher(key))


class TestEncryptionKeyManager:
    def test_get_cipher_before_initialize(self, secret_store):
        manager = EncryptionKeyManager(secret_store)
        assert not manager.is_initialized
        with pytest.raises(NotInitializedError):
            manager.get_cipher()

    @pytest.mark.asyncio
    async def test_initialize_then_get_cipher(self, secret_store):
        manager = EncryptionKeyManager(secret_store)
        cipher = await manager.initialize()
        assert manager.is_initialized
        assert manager.get_cipher() is cipher

    @pytest.mark.asyncio
    async def test_initialize_twice_returns_same_cipher(self, secret_store):
        manager = EncryptionKeyManager(secret_store)
        first = await manager.initialize()
        second = await manager.initialize()
        assert first is second
        assert len(secret_store.secrets) == 1

    @pytest.mark.asyncio
    async def test_first_run_persists_key_in_secret_store(self, secret_store):
        await EncryptionKeyManager(secret_store).initialize()
        assert DEFAULT_KEY_NAME in secret_store.secrets

    @pytest.mark.asyncio
    async def test_next_launch_reuses_key(self, secret_store):
        token = (await EncryptionKeyManager(secret_store).initialize()).encrypt(b"kept")

        relaunched = await EncryptionKeyManager(secret_store).initialize()
        assert relaunched.decrypt(token) == b"kept"

    @pytest.mark.asyncio
    async def test_reset_makes_old_data_unreadable(self, secret_store):
        manager = EncryptionKeyManager(secret_store)
        old = await manager.initialize()
        token = old.encrypt(b"gone")

        new = await manager.reset()
        assert new != old
        assert manager.get_cipher() is new
        with pytest.raises(DecryptionError):
            new.decrypt(token)

    @pytest.mark.asyncio
    async def test_delete_key(self, secret_store):
        manager = EncryptionKeyManager(secret_store)
        await manager.initialize()
        await manager.delete_key()

        assert secret_store.secrets == {}
        with pytest.raises(NotInitializedError):
            manager.get_cipher()

    @pytest.mark.asyncio
    async def test_malformed_stored_key(self, secret_store):
        secret_store.secrets[DEFAULT_KEY_NAME] = "not-a-valid-key"
        with pytest.raises(KeyStorageError):
            await EncryptionKeyManager(secret_store).initialize()

    @pytest.mark.asyncio
    async def test_key_never_logged(self, secret_store, caplog):
        caplog.set_level(logging.DEBUG)
        await EncryptionKeyManager(secret_store).initialize()
        key = secret_store.secrets[DEFAULT_KEY_NAME]
        assert key not in caplog.text
