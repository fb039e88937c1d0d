"""Process-wide registry of singleton instances and service factories."""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable

from .errors import ServiceAlreadyRegisteredError, ServiceNotFoundError

ServiceKey = tuple[Any, str]
Factory = Callable[[Any], Any]


class Lifetime(enum.Enum):
    """How long a resolved service lives."""

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


class Registry:
    """Holds singleton instances and scoped/transient factories by (type, name)."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._singletons: dict[ServiceKey, Any] = {}
        self._factories: dict[Lifetime, dict[ServiceKey, Factory]] = {
            Lifetime.SCOPED: {},
            Lifetime.TRANSIENT: {},
        }

    def _factory_map(self, lifetime: Lifetime) -> dict[ServiceKey, Factory]:
        try:
            return self._factories[Lifetime(lifetime)]
        except KeyError:
            raise ValueError(f"{lifetime} services are not built by factories") from None

    def register(self, lifetime: Lifetime, service_type: Any, factory: Factory, name: str = "") -> None:
        """Register a factory producing ``service_type`` for the given lifetime.

        The factory is called with the resolving scope and may return the
        service or an awaitable of it.
        """
        if not callable(factory):
            raise TypeError("factory must be callable")
        key = (service_type, name)
        with self._lock:
            factories = self._factory_map(lifetime)
            if key in factories:
                raise ServiceAlreadyRegisteredError(service_type, name)
            factories[key] = factory

    def add_singleton(self, instance: Any, name: str = "", service_type: Any = None) -> None:
        """Register a ready-made instance; its type is used unless given."""
        if service_type is None:
            service_type = type(instance)
        key = (service_type, name)
        with self._lock:
            if key in self._singletons:
                raise ServiceAlreadyRegisteredError(service_type, name)
            self._singletons[key] = instance

    def singleton(self, service_type: Any, name: str = "") -> Any:
        """Return the registered singleton or raise ServiceNotFoundError."""
        with self._lock:
            try:
                return self._singletons[(service_type, name)]
            except KeyError:
                raise ServiceNotFoundError(service_type, name) from None

    def factory(self, lifetime: Lifetime, service_type: Any, name: str = "") -> Factory:
        """Return the registered factory or raise ServiceNotFoundError."""
        with self._lock:
            try:
                return self._factory_map(lifetime)[(service_type, name)]
            except KeyError:
                raise ServiceNotFoundError(service_type, name) from None

    def reset(self) -> None:
        """Forget every registration."""
        with self._lock:
            self._singletons.clear()
            for factories in self._factories.values():
                factories.clear()


_GLOBAL_REGISTRY = Registry()


def global_registry() -> Registry:
    """Return the registry shared by the whole process."""
    return _GLOBAL_REGISTRY


def register_transient(service_type: Any, factory: Factory, name: str = "") -> None:
    """Register a factory whose result is built afresh on every resolution."""
    _GLOBAL_REGISTRY.register(Lifetime.TRANSIENT, service_type, factory, name)


def register_scoped(service_type: Any, factory: Factory, name: str = "") -> None:
    """Register a factory whose result is shared within one scope."""
    _GLOBAL_REGISTRY.register(Lifetime.SCOPED, service_type, factory, name)


def register_singleton(instance: Any, name: str = "", service_type: Any = None) -> None:
    """Register an instance shared by every scope."""
    _GLOBAL_REGISTRY.add_singleton(instance, name, service_type)


def reset_registry() -> None:
    """Clear the shared registry."""
    _GLOBAL_REGISTRY.reset()