from .store_affirmation_repository import StoreAffirmationRepository
from .store_app_state_repository import StoreAppStateRepository
from .store_settings_repository import StoreSettingsRepository

__all__ = [
    "StoreAffirmationRepository",
    "StoreAppStateRepository",
    "StoreSettingsRepository",
]
