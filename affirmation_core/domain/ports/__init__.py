"""Domain port protocols for decoupling services from infrastructure."""

from .secret_store import SecretStore
from .widget_storage import WidgetRefresher, WidgetStorage

__all__ = ["SecretStore", "WidgetRefresher", "WidgetStorage"]
