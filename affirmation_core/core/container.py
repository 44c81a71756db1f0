"""
Dependency injection container.

Holds the factories of one ``AffirmationCore`` instance. There is no
process-wide container: each core builds its own, so tests can run
several isolated cores side by side.

Usage:
    container = ServiceContainer()
    container.register_instance("config", config)
    container.register("store", lambda c: EmbeddedStore(c.get("config").database_path))
    store = container.get("store")
"""

import logging
from typing import Any, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

# Factory type: either a class or a callable that takes the container
Factory = Union[type, Callable[["ServiceContainer"], Any]]


class ServiceContainer:
    """
    Lazy service registry.

    Features:
    - Lazy initialization (services created on first access)
    - Singleton by default (or transient per-request)
    - Overrides by re-registering a name before first access
    """

    def __init__(self):
        self._factories: Dict[str, Factory] = {}
        self._instances: Dict[str, Any] = {}
        self._singleton_flags: Dict[str, bool] = {}

    def register(
        self,
        name: str,
        factory: Factory,
        singleton: bool = True,
    ) -> None:
        """
        Register a service factory.

        Args:
            name: Service name/key
            factory: Class or callable that creates the service.
                     If callable, receives the container as argument.
            singleton: If True (default), cache the instance.
        """
        self._factories[name] = factory
        self._singleton_flags[name] = singleton
        # Clear any cached instance if overriding
        self._instances.pop(name, None)
        logger.debug(f"Registered service: {name} (singleton={singleton})")

    def register_instance(self, name: str, instance: Any) -> None:
        """Register a pre-built instance."""
        self._instances[name] = instance
        self._singleton_flags[name] = True
        logger.debug(f"Registered instance: {name}")

    def get(self, name: str) -> Any:
        """
        Get a service by name.

        Raises:
            KeyError: If service is not registered
        """
        if name in self._instances and self._singleton_flags.get(name, True):
            return self._instances[name]

        if name not in self._factories:
            raise KeyError(f"Service '{name}' is not registered")

        factory = self._factories[name]
        if callable(factory) and not isinstance(factory, type):
            instance = factory(self)
        else:
            instance = factory()

        if self._singleton_flags.get(name, True):
            self._instances[name] = instance
            logger.debug(f"Created singleton instance: {name}")
        else:
            logger.debug(f"Created transient instance: {name}")

        return instance

    def has(self, name: str) -> bool:
        return name in self._factories or name in self._instances

    def names(self) -> List[str]:
        return sorted(set(self._factories) | set(self._instances))

    def clear(self) -> None:
        """Clear all registrations and instances."""
        self._factories.clear()
        self._instances.clear()
        self._singleton_flags.clear()
        logger.debug("Container cleared")
