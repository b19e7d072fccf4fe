"""ObjectRegistry — names of remote objects created and not yet torn down."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class ObjectRegistry:
    """Ordered list of object names.

    Names leave only through bulk deletion: ``discard()`` drops the names a
    delete batch attempted, ``clear()`` drops everything. A name may be present
    even though its submit failed; deleting it remotely is harmless.
    """

    def __init__(self) -> None:
        self._names: list[str] = []

    def register(self, object_name: str) -> None:
        self._names.append(object_name)

    def names(self) -> list[str]:
        """Snapshot in registration order."""
        return list(self._names)

    def discard(self, object_names: Iterable[str]) -> None:
        """Drop the given names, keeping any registered since they were read."""
        dropped = set(object_names)
        self._names = [name for name in self._names if name not in dropped]

    def clear(self) -> None:
        self._names.clear()

    def __contains__(self, object_name: object) -> bool:
        return object_name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._names)
