"""Decorator running a coroutine function inside a fresh resolution scope."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Awaitable, Callable, TypeVar

from .scope import DIScope

T = TypeVar("T")


def with_di_scope(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Wrap an async function so each call runs within its own DIScope."""
    if not inspect.iscoroutinefunction(func):
        raise TypeError("The 'with_di_scope' decorator can only be applied to async functions.")

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        return await DIScope.run_with_scope(lambda: func(*args, **kwargs))

    return wrapper