"""
Composition root.

``build_container`` wires every component of one core instance;
``AffirmationCore`` owns the lifecycle:

- Logging setup from config
- Key manager initialization (first run generates the key)
- Store open
- Widget bridge subscription and initial sync
- Pending widget syncs drained, then store close on shutdown

Usage:
    async with AffirmationCore(get_config()) as core:
        result = await core.create_affirmation.execute("I am enough")
"""

import logging
import random
from typing import Optional

from ..domain.events import EventBus
from ..domain.ports import SecretStore, WidgetRefresher, WidgetStorage
from ..infrastructure.repositories import (
    StoreAffirmationRepository,
    StoreAppStateRepository,
    StoreSettingsRepository,
)
from ..infrastructure.secrets import KeyringSecretStore
from ..infrastructure.widget import SharedFileWidgetStorage, SignalFileRefresher
from ..services.selection import RandomSelector
from ..services.usecases import (
    CreateAffirmation,
    DeleteAffirmation,
    EditAffirmation,
    ExportAffirmations,
    ImportAffirmations,
    ReorderAffirmations,
    ShowNextAffirmation,
    UpdateSettings,
)
from ..services.widget_sync import WidgetSyncBridge
from ..utils.logging import setup_logging
from .config import AppConfig, get_config
from .container import ServiceContainer
from .encryption import EncryptionKeyManager
from .store import EmbeddedStore

logger = logging.getLogger(__name__)


def build_container(
    config: AppConfig,
    secret_store: Optional[SecretStore] = None,
    widget_storage: Optional[WidgetStorage] = None,
    refresher: Optional[WidgetRefresher] = None,
    rng: Optional[random.Random] = None,
) -> ServiceContainer:
    """
    Register every component of one core instance.

    Adapters left as None get their production implementation
    (OS keyring, shared JSON file, signal file). Services are created
    on first access.
    """
    container = ServiceContainer()
    container.register_instance("config", config)
    container.register_instance("event_bus", EventBus())

    # ========================================================================
    # Adapters
    # ========================================================================

    if secret_store is not None:
        container.register_instance("secret_store", secret_store)
    else:
        container.register("secret_store", lambda c: KeyringSecretStore(c.get("config").keyring_service))

    if widget_storage is not None:
        container.register_instance("widget_storage", widget_storage)
    else:
        container.register(
            "widget_storage", lambda c: SharedFileWidgetStorage(c.get("config").widget_data_path)
        )

    if refresher is not None:
        container.register_instance("widget_refresher", refresher)
    else:
        container.register(
            "widget_refresher", lambda c: SignalFileRefresher(c.get("config").widget_signal_path)
        )

    # ========================================================================
    # Storage
    # ========================================================================

    container.register(
        "key_manager",
        lambda c: EncryptionKeyManager(c.get("secret_store"), c.get("config").encryption_key_name),
    )
    container.register("store", lambda c: EmbeddedStore(c.get("config").database_path))
    container.register("affirmation_repository", lambda c: StoreAffirmationRepository(c.get("store")))
    container.register("settings_repository", lambda c: StoreSettingsRepository(c.get("store")))
    container.register("app_state_repository", lambda c: StoreAppStateRepository(c.get("store")))

    # ========================================================================
    # Services
    # ========================================================================

    container.register("selector", lambda c: RandomSelector(rng))
    container.register(
        "widget_sync",
        lambda c: WidgetSyncBridge(
            c.get("affirmation_repository"),
            c.get("settings_repository"),
            c.get("app_state_repository"),
            c.get("widget_storage"),
            c.get("widget_refresher"),
        ),
    )

    # ========================================================================
    # Use cases
    # ========================================================================

    container.register(
        "create_affirmation",
        lambda c: CreateAffirmation(c.get("affirmation_repository"), c.get("event_bus")),
    )
    container.register(
        "edit_affirmation",
        lambda c: EditAffirmation(c.get("affirmation_repository"), c.get("event_bus")),
    )
    container.register(
        "delete_affirmation",
        lambda c: DeleteAffirmation(
            c.get("affirmation_repository"), c.get("app_state_repository"), c.get("event_bus")
        ),
    )
    container.register(
        "reorder_affirmations",
        lambda c: ReorderAffirmations(c.get("affirmation_repository"), c.get("event_bus")),
    )
    container.register(
        "import_affirmations",
        lambda c: ImportAffirmations(
            c.get("affirmation_repository"), c.get("app_state_repository"), c.get("event_bus")
        ),
    )
    container.register(
        "export_affirmations", lambda c: ExportAffirmations(c.get("affirmation_repository"))
    )
    container.register(
        "show_next_affirmation",
        lambda c: ShowNextAffirmation(
            c.get("affirmation_repository"),
            c.get("app_state_repository"),
            c.get("selector"),
            c.get("event_bus"),
        ),
    )
    container.register(
        "update_settings",
        lambda c: UpdateSettings(c.get("settings_repository"), c.get("event_bus")),
    )

    logger.debug(f"Container built with {len(container.names())} services")
    return container


class AffirmationCore:
    """One running instance of the data core."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        secret_store: Optional[SecretStore] = None,
        widget_storage: Optional[WidgetStorage] = None,
        refresher: Optional[WidgetRefresher] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or get_config()
        self.container = build_container(
            self.config,
            secret_store=secret_store,
            widget_storage=widget_storage,
            refresher=refresher,
            rng=rng,
        )

    # Convenience accessors
    @property
    def bus(self) -> EventBus:
        return self.container.get("event_bus")

    @property
    def key_manager(self) -> EncryptionKeyManager:
        return self.container.get("key_manager")

    @property
    def store(self) -> EmbeddedStore:
        return self.container.get("store")

    @property
    def affirmations(self) -> StoreAffirmationRepository:
        return self.container.get("affirmation_repository")

    @property
    def settings(self) -> StoreSettingsRepository:
        return self.container.get("settings_repository")

    @property
    def app_state(self) -> StoreAppStateRepository:
        return self.container.get("app_state_repository")

    @property
    def widget_sync(self) -> WidgetSyncBridge:
        return self.container.get("widget_sync")

    @property
    def create_affirmation(self) -> CreateAffirmation:
        return self.container.get("create_affirmation")

    @property
    def edit_affirmation(self) -> EditAffirmation:
        return self.container.get("edit_affirmation")

    @property
    def delete_affirmation(self) -> DeleteAffirmation:
        return self.container.get("delete_affirmation")

    @property
    def reorder_affirmations(self) -> ReorderAffirmations:
        return self.container.get("reorder_affirmations")

    @property
    def import_affirmations(self) -> ImportAffirmations:
        return self.container.get("import_affirmations")

    @property
    def export_affirmations(self) -> ExportAffirmations:
        return self.container.get("export_affirmations")

    @property
    def show_next_affirmation(self) -> ShowNextAffirmation:
        return self.container.get("show_next_affirmation")

    @property
    def update_settings(self) -> UpdateSettings:
        return self.container.get("update_settings")

    @property
    def is_open(self) -> bool:
        return self.store.is_open

    async def open(self) -> None:
        """Initialize encryption, open the store and publish the first snapshot."""
        if self.is_open:
            return
        if self.config.configure_logging:
            setup_logging(self.config.log_level, self.config.log_to_file, self.config.log_dir)
        logger.info(f"Starting affirmation core ({self.config.environment})")

        try:
            cipher = await self.key_manager.initialize()
        except Exception as e:
            logger.error(f"Encryption initialization failed: {e}")
            raise

        await self.store.open(cipher)
        self.widget_sync.register(self.bus)

        # Startup sync is best effort like every other sync.
        await self.widget_sync.sync(reason="startup")
        logger.info("Affirmation core ready")

    async def close(self) -> None:
        if not self.is_open:
            return
        self.widget_sync.unregister(self.bus)
        # Let scheduled syncs finish before the store goes away.
        await self.widget_sync.drain(timeout=self.config.sync_drain_timeout)
        await self.store.close()
        logger.info("Affirmation core closed")

    async def __aenter__(self) -> "AffirmationCore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
