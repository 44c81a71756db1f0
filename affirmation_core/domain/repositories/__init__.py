from .affirmation_repository import AffirmationRepository
from .app_state_repository import AppStateRepository
from .settings_repository import SettingsRepository

__all__ = ["AffirmationRepository", "AppStateRepository", "SettingsRepository"]
