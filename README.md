# scopedi

A small dependency-injection container for `asyncio` code. Services are keyed
by a type and an optional name (the empty string by default), and live with
one of three lifetimes (`scopedi.registry.Lifetime`):

- **singleton**: one instance registered up front and shared everywhere;
- **scoped**: built by a factory once per `DIScope` and reused within it;
- **transient**: built by a factory on every resolution.

A factory is any callable that takes the resolving `DIScope` and returns the
service, or an awaitable of it, so coroutine functions work and can resolve
their own dependencies. Resolution checks singletons first, then instances
already cached in the scope, then scoped factories, then transient factories.
A service whose resolution needs the same type again, directly or indirectly,
raises `CircularDependencyError` instead of recursing forever.

## Installing

```
pip install .
```

The package has no dependencies outside the standard library.

## Registering services

Registrations go into one process-wide registry:

```python
from scopedi.registry import register_singleton, register_scoped, register_transient


class Settings:
    def __init__(self, dsn):
        self.dsn = dsn


class Session:
    def __init__(self, settings):
        self.settings = settings


class Request:
    pass


async def make_session(scope):
    settings = await scope.get(Settings)
    return Session(settings)


register_singleton(Settings("sqlite://"))
register_scoped(Session, make_session)
register_transient(Request, lambda scope: Request())
```

`register_singleton(instance, name="", service_type=None)` keys the instance by
its own type unless `service_type` is given. `register_scoped` and
`register_transient` take `(service_type, factory, name="")`. A name lets
several services of one type coexist, e.g.
`register_singleton(conn, name="primary")`. Registering the same type and name
twice for the same lifetime raises `ServiceAlreadyRegisteredError`.

`reset_registry()` forgets every registration; `global_registry()` returns the
shared `Registry` object itself.

## Resolving inside a scope

`DIScope.run_with_scope(func)` creates a fresh scope, makes it current for the
duration of the call, awaits `func()` and returns its result:

```python
import asyncio

from scopedi.scope import DIScope


async def handle():
    scope = DIScope.current()
    session = await scope.get(Session)
    same = await scope.get(Session)
    assert session is same
    return session.settings.dsn


print(asyncio.run(DIScope.run_with_scope(handle)))
```

- `await scope.get(Type)` or `await scope.by_name(Type, "name")` resolves a
  service. Resolution must happen inside `run_with_scope`; otherwise it raises
  `FactoryError`.
- A missing service raises `ServiceNotFoundError`.
- An exception raised by a factory is wrapped in `FactoryError` (its `cause`
  attribute holds the original); `DiError` subclasses pass through unchanged.
- `DIScope.current()` outside a scope raises `NoScopeError`.
- `scope.clear_scoped_instances()` drops the instances the scope has cached, so
  the next resolution builds them again. `scope.has_scoped(Type, name="")` and
  `scope.scoped_count()` inspect that cache.

Each call to `run_with_scope` gets its own scope, so scoped services are built
once per call; singletons are the same object in every scope.

## The `with_di_scope` decorator

```python
from scopedi.decorators import with_di_scope


@with_di_scope
async def job():
    scope = DIScope.current()
    return await scope.get(Request)
```

Every call of `job()` runs in a new scope, passing its arguments through. The
decorator accepts only coroutine functions and raises `TypeError` for anything
else.

## Errors

All errors derive from `scopedi.errors.DiError`:
`ServiceNotFoundError`, `ServiceAlreadyRegisteredError` and
`CircularDependencyError` carry `service_type` and `name`; `FactoryError`
carries `cause`; `NoScopeError` is a `FactoryError`.

## What it does not do

Services are not built by inspecting constructors: every scoped or transient
service needs an explicit factory. Scoped instances are not closed or disposed
when a scope ends; they are simply dropped. Registrations cannot be removed
one by one, only all at once with `reset_registry()`.

## Tests

```
pip install ".[test]"
pytest
```