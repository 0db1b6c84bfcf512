"""Insertion-ordered surrogate key assignment."""

from typing import Generic, Hashable, Iterator, TypeVar

K = TypeVar("K", bound=Hashable)


class KeyRegistry(Generic[K]):
    """
    Assigns consecutive integer IDs to keys in first-seen order and
    accumulates an incidence per ID.

    IDs start at 1 and are never reused or renumbered. The order of
    assignment is the order in which keys are first passed to ``add``,
    so the ID contract depends only on the caller's traversal order.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._ids: dict[K, int] = {}
        self._keys: list[K] = []
        self._incidence: list[int] = []

    def add(self, key: K, incidence: int = 0) -> int:
        """
        Look up or assign the ID for a key and add to its incidence.

        Args:
            key: Key to register.
            incidence: Amount to add to the key's running total.

        Returns:
            The key's surrogate ID.
        """
        index = self._ids.get(key)
        if index is None:
            index = len(self._keys)
            self._ids[key] = index
            self._keys.append(key)
            self._incidence.append(0)
        self._incidence[index] += incidence
        return index + 1

    def __len__(self) -> int:
        """Return the number of distinct keys."""
        return len(self._keys)

    def __iter__(self) -> Iterator[tuple[int, K, int]]:
        """Yield ``(id, key, incidence)`` in ascending ID order."""
        for index, key in enumerate(self._keys):
            yield index + 1, key, self._incidence[index]

    @property
    def total(self) -> int:
        """Return the sum of all incidences."""
        return sum(self._incidence)
