import logging
import logging.handlers
import os
import random
from typing import Any, Dict, List, Mapping, Optional

import pytest

# Set test environment variables
os.environ["AFFIRM_ENVIRONMENT"] = "test"
os.environ["AFFIRM_LOG_LEVEL"] = "WARNING"

from affirmation_core.core.bootstrap import AffirmationCore  # noqa: E402
from affirmation_core.core.config import AppConfig  # noqa: E402
from affirmation_core.core.encryption import EncryptionKeyManager  # noqa: E402
from affirmation_core.core.store import EmbeddedStore  # noqa: E402
from affirmation_core.domain.events import EventBus  # noqa: E402
from affirmation_core.infrastructure.repositories import (  # noqa: E402
    StoreAffirmationRepository,
    StoreAppStateRepository,
    StoreSettingsRepository,
)


class InMemorySecretStore:
    """Dict-backed SecretStore double."""

    def __init__(self) -> None:
        self.secrets: Dict[str, str] = {}

    async def get_secret(self, name: str) -> Optional[str]:
        return self.secrets.get(name)

    async def set_secret(self, name: str, value: str) -> None:
        self.secrets[name] = value

    async def delete_secret(self, name: str) -> None:
        self.secrets.pop(name, None)


class RecordingWidgetStorage:
    """WidgetStorage double keeping every written document."""

    def __init__(self, fail: bool = False) -> None:
        self.values: Dict[str, Any] = {}
        self.writes: List[Dict[str, Any]] = []
        self.fail = fail

    async def replace(self, values: Mapping[str, Any]) -> None:
        from affirmation_core.domain.errors import SyncBridgeError

        if self.fail:
            raise SyncBridgeError("shared area unavailable")
        self.values = dict(values)
        self.writes.append(dict(values))

    async def read(self) -> Dict[str, Any]:
        return dict(self.values)

    async def clear(self) -> None:
        await self.replace({})


class RecordingRefresher:
    def __init__(self) -> None:
        self.requests = 0

    async def request_refresh(self) -> None:
        self.requests += 1


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/app.log."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    # Restore any that were removed (and strip any new ones tests may have added)
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture
def secret_store():
    return InMemorySecretStore()


@pytest.fixture
async def cipher(secret_store):
    return await EncryptionKeyManager(secret_store).initialize()


@pytest.fixture
async def store(tmp_path, cipher):
    """Open store on a real SQLite file."""
    embedded = EmbeddedStore(tmp_path / "affirmations.db")
    await embedded.open(cipher)
    yield embedded
    await embedded.close()


@pytest.fixture
def affirmation_repo(store):
    return StoreAffirmationRepository(store)


@pytest.fixture
def settings_repo(store):
    return StoreSettingsRepository(store)


@pytest.fixture
def app_state_repo(store):
    return StoreAppStateRepository(store)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def widget_storage():
    return RecordingWidgetStorage()


@pytest.fixture
def failing_widget_storage():
    return RecordingWidgetStorage(fail=True)


@pytest.fixture
def refresher():
    return RecordingRefresher()


@pytest.fixture
def config(tmp_path):
    return AppConfig(data_dir=tmp_path / "data", configure_logging=False)


@pytest.fixture
async def core(config, secret_store):
    """Open core with in-memory secrets and the real shared-file widget area."""
    instance = AffirmationCore(config, secret_store=secret_store, rng=random.Random(42))
    await instance.open()
    yield instance
    await instance.close()
