"""Resolution scopes: per-task service lookup with scoped instance caching."""

from __future__ import annotations

import inspect
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, TypeVar

from .errors import (
    CircularDependencyError,
    DiError,
    FactoryError,
    NoScopeError,
    ServiceNotFoundError,
)
from .registry import Factory, Lifetime, Registry, ServiceKey, global_registry

T = TypeVar("T")

_CURRENT_SCOPE: ContextVar["DIScope"] = ContextVar("scopedi_current_scope")
_RESOLVING_STACK: ContextVar[tuple[Any, ...]] = ContextVar("scopedi_resolving_stack")


class DIScope:
    """Resolves services and caches scoped instances for its own lifetime."""

    def __init__(self, registry: Registry | None = None) -> None:
        self._registry = registry if registry is not None else global_registry()
        self._scoped_instances: dict[ServiceKey, Any] = {}

    def __repr__(self) -> str:
        return f"DIScope(scoped_instances_count={len(self._scoped_instances)})"

    @staticmethod
    def current() -> "DIScope":
        """Return the scope active in the current task or raise NoScopeError."""
        try:
            return _CURRENT_SCOPE.get()
        except LookupError:
            raise NoScopeError("no scope is active in this context") from None

    @staticmethod
    async def run_with_scope(func: Callable[[], Awaitable[T]]) -> T:
        """Await ``func()`` with a fresh scope active, returning its result."""
        scope = DIScope()
        scope_token = _CURRENT_SCOPE.set(scope)
        stack_token = _RESOLVING_STACK.set(())
        try:
            return await func()
        finally:
            _RESOLVING_STACK.reset(stack_token)
            _CURRENT_SCOPE.reset(scope_token)

    async def get(self, service_type: Any, name: str = "") -> Any:
        """Resolve the service registered for ``service_type``."""
        return await self.by_name(service_type, name)

    async def by_name(self, service_type: Any, name: str = "") -> Any:
        """Resolve the service registered for ``service_type`` under ``name``.

        Lookup order: singletons, this scope's cached instances, scoped
        factories, transient factories.
        """
        try:
            stack = _RESOLVING_STACK.get()
        except LookupError:
            raise FactoryError(
                "Failed to access resolving stack: resolution must run inside run_with_scope"
            ) from None
        if service_type in stack:
            raise CircularDependencyError(service_type, name)
        token = _RESOLVING_STACK.set(stack + (service_type,))
        try:
            return await self._resolve(service_type, name)
        finally:
            _RESOLVING_STACK.reset(token)

    def clear_scoped_instances(self) -> None:
        """Drop every cached scoped instance."""
        self._scoped_instances.clear()

    def has_scoped(self, service_type: Any, name: str = "") -> bool:
        """Tell whether a scoped instance is cached for the key."""
        return (service_type, name) in self._scoped_instances

    def scoped_count(self) -> int:
        """Return the number of cached scoped instances."""
        return len(self._scoped_instances)

    async def _resolve(self, service_type: Any, name: str) -> Any:
        key = (service_type, name)
        try:
            return self._registry.singleton(service_type, name)
        except ServiceNotFoundError:
            pass

        if key in self._scoped_instances:
            return self._scoped_instances[key]

        scoped_factory = self._lookup_factory(Lifetime.SCOPED, service_type, name)
        if scoped_factory is not None:
            instance = await self._build(scoped_factory)
            self._scoped_instances[key] = instance
            return instance

        transient_factory = self._lookup_factory(Lifetime.TRANSIENT, service_type, name)
        if transient_factory is not None:
            return await self._build(transient_factory)

        raise ServiceNotFoundError(service_type, name)

    def _lookup_factory(self, lifetime: Lifetime, service_type: Any, name: str) -> Factory | None:
        try:
            return self._registry.factory(lifetime, service_type, name)
        except ServiceNotFoundError:
            return None

    async def _build(self, factory: Factory) -> Any:
        try:
            result = factory(self)
            if inspect.isawaitable(result):
                result = await result
        except DiError:
            raise
        except Exception as exc:
            raise FactoryError(exc) from exc
        return result