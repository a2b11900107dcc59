"""
In-memory key/value collection backing every store.

Notable properties:
- Keys are normalized with str(), so save(1, ...) and find("1") agree.
- save() overwrites an existing key.
- find() on a missing key returns None.
- replace() and remove() report whether the key existed.
"""

from collections.abc import Iterator
from typing import Any


class MemoryStorage:
    """Unordered mapping from key to item, owned by a single store."""

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def save(self, key: Any, item: Any) -> None:
        """Insert an item, overwriting any item under the same key."""
        self._items[str(key)] = item

    def find(self, key: Any) -> Any | None:
        """Return the item stored under key, or None."""
        return self._items.get(str(key))

    def replace(self, key: Any, item: Any) -> bool:
        """Overwrite an existing item. Returns False if key is absent."""
        key = str(key)
        if key not in self._items:
            return False
        self._items[key] = item
        return True

    def remove(self, key: Any) -> bool:
        """Drop an item. Returns False if key is absent."""
        return self._items.pop(str(key), _MISSING) is not _MISSING

    def clear(self) -> None:
        self._items.clear()

    def count(self) -> int:
        return len(self._items)

    def keys(self) -> list[str]:
        return list(self._items.keys())

    def values(self) -> list[Any]:
        return list(self._items.values())

    def items(self) -> list[tuple[str, Any]]:
        return list(self._items.items())

    def snapshot(self) -> list[tuple[str, Any]]:
        """Copy of the current (key, item) pairs, safe to iterate while mutating."""
        return list(self._items.items())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return str(key) in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items.values()))


_MISSING = object()
