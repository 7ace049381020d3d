"""
Mapping that stores nested data under flattened, dot-delimited keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any


class FlatMap(MutableMapping[str, Any]):
    """
    A mutable mapping whose leaves live under flattened keys.

    Writing a non-empty mapping spreads it over child keys, so
    ``put("a", {"b": 1})`` stores ``"a.b" -> 1``. Reading an interior key
    reassembles the nested structure below it. Lists and any other
    non-mapping values are stored as leaves.
    """

    def __init__(
        self,
        items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        separator: str = ".",
    ):
        self._separator = separator
        self._items: dict[str, Any] = {}
        if items:
            for key, value in dict(items).items():
                self.put(key, value)

    def put(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing whatever was there before."""
        self._discard(key)

        # A leaf cannot also have children
        parts = key.split(self._separator)
        for i in range(1, len(parts)):
            self._items.pop(self._separator.join(parts[:i]), None)

        if isinstance(value, Mapping) and value:
            for child, child_value in value.items():
                self.put(f"{key}{self._separator}{child}", child_value)
        else:
            self._items[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Reassemble the full nested structure."""
        return self._nest((key.split(self._separator), value) for key, value in self._items.items())

    def _subtree(self, key: str) -> list[tuple[list[str], Any]]:
        prefix = key + self._separator
        return [
            (flat_key[len(prefix):].split(self._separator), value)
            for flat_key, value in self._items.items()
            if flat_key.startswith(prefix)
        ]

    def _discard(self, key: str) -> bool:
        prefix = key + self._separator
        doomed = [flat_key for flat_key in self._items if flat_key == key or flat_key.startswith(prefix)]
        for flat_key in doomed:
            del self._items[flat_key]
        return bool(doomed)

    @staticmethod
    def _nest(pairs: Iterable[tuple[list[str], Any]]) -> dict[str, Any]:
        nested: dict[str, Any] = {}
        for parts, value in pairs:
            node = nested
            for part in parts[:-1]:
                node = node.setdefault(part, {})
            node[parts[-1]] = value
        return nested

    def __getitem__(self, key: str) -> Any:
        if key in self._items:
            return self._items[key]
        subtree = self._subtree(key)
        if not subtree:
            raise KeyError(key)
        return self._nest(subtree)

    def __setitem__(self, key: str, value: Any) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        if not self._discard(key):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        if key in self._items:
            return True
        prefix = key + self._separator
        return any(flat_key.startswith(prefix) for flat_key in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"FlatMap({self._items!r})"
