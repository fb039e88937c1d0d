"""Async dependency injection with singleton, scoped and transient lifetimes.

Modules: ``errors`` (exceptions), ``registry`` (registrations), ``scope``
(``DIScope`` resolution) and ``decorators`` (``with_di_scope``).
"""

__version__ = "0.1.0"