"""Dependency injection container wiring the bot's services together."""

import inspect
import logging
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import ICatalogService, ICommandRouter, IMessenger, IQueueStore

T = TypeVar("T")


class Container:
    """Resolves services by interface, building singletons on first use.

    Constructor parameters annotated with ``Config`` receive the loaded
    configuration; parameters annotated with a registered interface receive
    that service. Anything else must have a default.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        self._implementations: Dict[Type, Type] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}
        self._instances: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Build ``implementation`` once, the first time ``interface`` is requested."""
        self._implementations[interface] = implementation
        self._instances.pop(interface, None)
        self._logger.debug(f"{interface.__name__} -> {implementation.__name__} (singleton)")

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Call ``factory`` on every request for ``interface``."""
        self._factories[interface] = factory
        self._logger.debug(f"{interface.__name__} -> factory")

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Serve an already built object for ``interface``."""
        self._instances[interface] = instance
        self._logger.debug(f"{interface.__name__} -> {type(instance).__name__} instance")

    def get(self, interface: Type[T]) -> T:
        """Resolve a service.

        Raises:
            ValueError: If nothing is registered for ``interface`` or one of
                its constructor dependencies cannot be resolved.
        """
        if interface in self._instances:
            return self._instances[interface]  # type: ignore

        if interface in self._factories:
            return self._factories[interface]()  # type: ignore

        implementation = self._implementations.get(interface)
        if implementation is None:
            raise ValueError(f"Service not registered: {interface.__name__}")

        instance = self._build(implementation)
        self._instances[interface] = instance
        return instance  # type: ignore

    def is_registered(self, interface: Any) -> bool:
        return (
            interface in self._instances
            or interface in self._factories
            or interface in self._implementations
        )

    def _build(self, implementation: Type[T]) -> T:
        kwargs: Dict[str, Any] = {}

        for name, param in inspect.signature(implementation.__init__).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            if param.annotation is Config:
                kwargs[name] = self.get_config()
            elif self.is_registered(param.annotation):
                kwargs[name] = self.get(param.annotation)
            elif param.default is inspect.Parameter.empty:
                raise ValueError(
                    f"Cannot resolve dependency {name} of {implementation.__name__}: "
                    f"{param.annotation}"
                )

        return implementation(**kwargs)

    @lru_cache(maxsize=1)
    def get_config(self) -> Config:
        return self._config_manager.get_config()

    def configure_default_services(self, messenger: Optional[IMessenger] = None) -> None:
        """Register the production wiring.

        Args:
            messenger: Chat transport replies go through. Defaults to the console.
        """
        from ..core.services import (
            CommandRouter,
            ConsoleMessenger,
            IntentClassifier,
            JsonQueueStore,
            ResponseComposer,
            TMDbService,
        )

        self.register_instance(IMessenger, messenger or ConsoleMessenger())  # type: ignore
        self.register_singleton(ICatalogService, TMDbService)  # type: ignore
        self.register_singleton(IQueueStore, JsonQueueStore)  # type: ignore
        self.register_singleton(IntentClassifier, IntentClassifier)
        self.register_singleton(ResponseComposer, ResponseComposer)
        self.register_singleton(ICommandRouter, CommandRouter)  # type: ignore

        self._logger.info("Default services configured")

    async def close(self) -> None:
        """Close every built service that holds resources (HTTP sessions)."""
        for instance in list(self._instances.values()):
            close = getattr(instance, "close", None)
            if close is not None and inspect.iscoroutinefunction(close):
                await close()

    def reset(self) -> None:
        """Forget all registrations and built services."""
        self._implementations.clear()
        self._factories.clear()
        self._instances.clear()
        self.get_config.cache_clear()
        self._logger.debug("Container reset")
