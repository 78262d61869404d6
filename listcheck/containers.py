"""Concrete list implementations.

- ``ReferenceList``: the trusted reference, backed by a builtin ``list``
- ``DynamicArray``: an independent array-backed implementation that manages
  its own capacity; a known-good candidate for smoke runs and tests
"""

import functools
from collections.abc import Iterator
from typing import Any, Callable

from listcheck.contract import (
    Cursor,
    ListContract,
    check_position,
    list_hash,
    sub_list_bounds,
)


class IndexCursor(Cursor):
    """Cursor over a snapshot of positions ``[start, stop)`` of a sequence."""

    def __init__(self, source: Callable[[int], Any], start: int, stop: int):
        self._source = source
        self._position = start
        self._stop = stop

    def try_advance(self, action: Callable[[Any], None]) -> bool:
        if self._position >= self._stop:
            return False
        action(self._source(self._position))
        self._position += 1
        return True

    def estimate_size(self) -> int:
        return self._stop - self._position


def _lookup(values) -> Any:
    """Membership structure for bulk operations."""
    try:
        return set(values)
    except TypeError:
        return list(values)


def _copy_into(values: list, array: list) -> list:
    if len(array) < len(values):
        return list(values)
    array[: len(values)] = values
    if len(array) > len(values):
        array[len(values)] = None
    return array


class ReferenceList(ListContract):
    """Reference implementation delegating to a builtin list."""

    def __init__(self, values=None):
        self._items: list = list(values) if values is not None else []

    def size(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def contains(self, value: object) -> bool:
        return value in self._items

    def iterator(self) -> Iterator[int]:
        return iter(self._items)

    def to_array(self) -> list:
        return list(self._items)

    def to_array_into(self, array: list) -> list:
        return _copy_into(self._items, array)

    def append(self, value: int) -> bool:
        self._items.append(value)
        return True

    def remove(self, value: object) -> bool:
        try:
            self._items.remove(value)
        except ValueError:
            return False
        return True

    def contains_all(self, values) -> bool:
        present = _lookup(self._items)
        return all(value in present for value in values)

    def extend(self, values) -> bool:
        values = list(values)
        self._items.extend(values)
        return bool(values)

    def insert_all(self, index: int, values) -> bool:
        check_position(index, len(self._items), inclusive=True)
        values = list(values)
        self._items[index:index] = values
        return bool(values)

    def remove_all(self, values) -> bool:
        doomed = _lookup(values)
        before = len(self._items)
        self._items = [item for item in self._items if item not in doomed]
        return len(self._items) != before

    def retain_all(self, values) -> bool:
        kept = _lookup(values)
        before = len(self._items)
        self._items = [item for item in self._items if item in kept]
        return len(self._items) != before

    def replace_all(self, transform) -> None:
        self._items = [transform(item) for item in self._items]

    def sort(self, comparator) -> None:
        self._items.sort(key=functools.cmp_to_key(comparator))

    def clear(self) -> None:
        self._items.clear()

    def equals(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, ListContract):
            return False
        return self._items == list(other.iterator())

    def hash_code(self) -> int:
        return list_hash(self._items)

    def get(self, index: int) -> int:
        check_position(index, len(self._items))
        return self._items[index]

    def set(self, index: int, value: int) -> int:
        check_position(index, len(self._items))
        previous = self._items[index]
        self._items[index] = value
        return previous

    def insert(self, index: int, value: int) -> None:
        check_position(index, len(self._items), inclusive=True)
        self._items.insert(index, value)

    def pop(self, index: int) -> int:
        check_position(index, len(self._items))
        return self._items.pop(index)

    def index_of(self, value: object) -> int:
        try:
            return self._items.index(value)
        except ValueError:
            return -1

    def last_index_of(self, value: object) -> int:
        for position in range(len(self._items) - 1, -1, -1):
            if self._items[position] == value:
                return position
        return -1

    def list_iterator(self) -> Iterator[int]:
        return iter(self._items)

    def list_iterator_from(self, index: int) -> Iterator[int]:
        check_position(index, len(self._items), inclusive=True)
        return iter(self._items[index:])

    def sub_list(self, start: int, stop: int) -> list:
        start, stop = sub_list_bounds(start, stop, len(self._items))
        return self._items[start:stop]

    def cursor(self) -> Cursor:
        return IndexCursor(self._items.__getitem__, 0, len(self._items))

    def __repr__(self) -> str:
        return f"ReferenceList(size={len(self._items)})"


class DynamicArray(ListContract):
    """Array-backed list with explicit capacity management.

    Storage is a fixed-length slot array; only the first ``_size`` slots are
    live. Capacity grows by half its current value when full.

    Args:
        capacity: Initial number of slots
    """

    DEFAULT_CAPACITY = 10

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 0:
            raise ValueError(f"Illegal capacity: {capacity}")
        self._slots: list = [None] * capacity
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def _ensure_capacity(self, minimum: int) -> None:
        if minimum <= len(self._slots):
            return
        grown = max(minimum, len(self._slots) + (len(self._slots) >> 1), self.DEFAULT_CAPACITY)
        self._slots.extend([None] * (grown - len(self._slots)))

    def _live(self) -> list:
        return self._slots[: self._size]

    def _replace_contents(self, values: list) -> None:
        self._slots[: len(values)] = values
        for position in range(len(values), self._size):
            self._slots[position] = None
        self._size = len(values)

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def contains(self, value: object) -> bool:
        return self.index_of(value) >= 0

    def iterator(self) -> Iterator[int]:
        for position in range(self._size):
            yield self._slots[position]

    def to_array(self) -> list:
        return self._live()

    def to_array_into(self, array: list) -> list:
        return _copy_into(self._live(), array)

    def append(self, value: int) -> bool:
        self._ensure_capacity(self._size + 1)
        self._slots[self._size] = value
        self._size += 1
        return True

    def remove(self, value: object) -> bool:
        position = self.index_of(value)
        if position < 0:
            return False
        self.pop(position)
        return True

    def contains_all(self, values) -> bool:
        present = _lookup(self._live())
        return all(value in present for value in values)

    def extend(self, values) -> bool:
        return self.insert_all(self._size, values)

    def insert_all(self, index: int, values) -> bool:
        check_position(index, self._size, inclusive=True)
        incoming = list(values)
        if not incoming:
            return False
        count = len(incoming)
        self._ensure_capacity(self._size + count)
        self._slots[index + count: self._size + count] = self._slots[index: self._size]
        self._slots[index: index + count] = incoming
        self._size += count
        return True

    def _filter(self, keep: Callable[[Any], bool]) -> bool:
        survivors = [value for value in self._live() if keep(value)]
        changed = len(survivors) != self._size
        self._replace_contents(survivors)
        return changed

    def remove_all(self, values) -> bool:
        doomed = _lookup(values)
        return self._filter(lambda value: value not in doomed)

    def retain_all(self, values) -> bool:
        kept = _lookup(values)
        return self._filter(lambda value: value in kept)

    def replace_all(self, transform) -> None:
        for position in range(self._size):
            self._slots[position] = transform(self._slots[position])

    def sort(self, comparator) -> None:
        self._replace_contents(sorted(self._live(), key=functools.cmp_to_key(comparator)))

    def clear(self) -> None:
        for position in range(self._size):
            self._slots[position] = None
        self._size = 0

    def equals(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, ListContract):
            return False
        return self._live() == list(other.iterator())

    def hash_code(self) -> int:
        return list_hash(self._live())

    def get(self, index: int) -> int:
        check_position(index, self._size)
        return self._slots[index]

    def set(self, index: int, value: int) -> int:
        check_position(index, self._size)
        previous = self._slots[index]
        self._slots[index] = value
        return previous

    def insert(self, index: int, value: int) -> None:
        check_position(index, self._size, inclusive=True)
        self._ensure_capacity(self._size + 1)
        self._slots[index + 1: self._size + 1] = self._slots[index: self._size]
        self._slots[index] = value
        self._size += 1

    def pop(self, index: int) -> int:
        check_position(index, self._size)
        removed = self._slots[index]
        self._slots[index: self._size - 1] = self._slots[index + 1: self._size]
        self._size -= 1
        self._slots[self._size] = None
        return removed

    def index_of(self, value: object) -> int:
        for position in range(self._size):
            if self._slots[position] == value:
                return position
        return -1

    def last_index_of(self, value: object) -> int:
        for position in range(self._size - 1, -1, -1):
            if self._slots[position] == value:
                return position
        return -1

    def list_iterator(self) -> Iterator[int]:
        return self.iterator()

    def list_iterator_from(self, index: int) -> Iterator[int]:
        check_position(index, self._size, inclusive=True)
        return iter(self._slots[index: self._size])

    def sub_list(self, start: int, stop: int) -> list:
        start, stop = sub_list_bounds(start, stop, self._size)
        return self._slots[start:stop]

    def cursor(self) -> Cursor:
        return IndexCursor(self.get, 0, self._size)

    def __repr__(self) -> str:
        return f"DynamicArray(size={self._size}, capacity={len(self._slots)})"
