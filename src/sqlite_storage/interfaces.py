"""
Structural interfaces for stores and stored types.

A store is composed from independent facets so a read-only variant can
implement Loadable with a no-op Persistable.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HasPrimaryKey(Protocol):
    """A stored type that names its own key."""

    def primary_key(self) -> Any: ...


@runtime_checkable
class Loadable(Protocol):
    def load(self) -> None: ...


@runtime_checkable
class Persistable(Protocol):
    def persist(self) -> None: ...


@runtime_checkable
class Closable(Protocol):
    def close(self) -> None: ...


@runtime_checkable
class ManagedStorage(Loadable, Persistable, Closable, Protocol):
    """A store whose lifetime is driven by lifecycle hooks."""
