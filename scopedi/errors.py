"""Exceptions raised while registering and resolving services."""

from __future__ import annotations

from typing import Any


def _type_name(service_type: Any) -> str:
    """Return a readable name for a service type."""
    qualname = getattr(service_type, "__qualname__", None)
    if qualname is None:
        return repr(service_type)
    module = getattr(service_type, "__module__", None)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


class DiError(Exception):
    """Base class for every dependency-injection error."""


class _ServiceKeyError(DiError):
    """An error tied to a particular (service type, name) key."""

    _template = "{type} with name: {name}"

    def __init__(self, service_type: Any, name: str = "") -> None:
        self.service_type = service_type
        self.name = name
        super().__init__(self._template.format(type=_type_name(service_type), name=name))


class ServiceNotFoundError(_ServiceKeyError):
    """No singleton, scoped or transient service is registered for the key."""

    _template = "Service not found for type: {type} with name: {name}"


class ServiceAlreadyRegisteredError(_ServiceKeyError):
    """A service is already registered for the key."""

    _template = "Service already registered for type: {type} with name: {name}"


class CircularDependencyError(_ServiceKeyError):
    """Resolving the service requires resolving itself."""

    _template = "Circular dependency detected for type: {type} with name: {name}"


class FactoryError(DiError):
    """A service could not be produced; wraps the underlying cause."""

    def __init__(self, cause: Any) -> None:
        self.cause = cause
        super().__init__(f"Service factory error: {cause}")


class NoScopeError(FactoryError):
    """There is no active scope in the current task."""

    def __init__(self, detail: str | None = None) -> None:
        text = "No DI scope found in this task"
        if detail:
            text = f"{text}: {detail}"
        self.detail = detail
        super().__init__(text)