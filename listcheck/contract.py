"""The list contract exercised by the harness.

``ListContract`` is the single interface the harness knows how to test. Every
abstract method on it is one operation; the harness discovers them by
introspection, so adding an operation means adding an annotated abstract method
here (and implementing it in the reference).

Parameters are annotated with semantic types. Each one is an
``Annotated[...]`` alias whose metadata names the ``ParamKind`` the argument
synthesizer must produce for it.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Iterator
from enum import Enum
from typing import Annotated, Any


class ParamKind(str, Enum):
    """Recognized parameter kinds.

    Attributes:
        INDEX: Valid position in the current container
        ELEMENT: A single element value
        BULK: A collection of element values
        COMPARATOR: Three-way comparison function over elements
        TRANSFORM: Unary element transform
        ARRAY: Pre-allocated object array
        UNSUPPORTED: Anything else; synthesis fails explicitly
    """
    INDEX = "index"
    ELEMENT = "element"
    BULK = "bulk"
    COMPARATOR = "comparator"
    TRANSFORM = "transform"
    ARRAY = "array"
    UNSUPPORTED = "unsupported"


Index = Annotated[int, ParamKind.INDEX]
Element = Annotated[int, ParamKind.ELEMENT]
Bulk = Annotated[Collection[int], ParamKind.BULK]
Comparator = Annotated[Callable[[int, int], int], ParamKind.COMPARATOR]
Transform = Annotated[Callable[[int], int], ParamKind.TRANSFORM]
ObjectArray = Annotated[list, ParamKind.ARRAY]


class Cursor(ABC):
    """Opaque traversal handle.

    Cursors have no element-level equality, so the harness only checks that
    creating one does not fail on the candidate.
    """

    @abstractmethod
    def try_advance(self, action: Callable[[Any], None]) -> bool:
        """Apply ``action`` to the next element, if any."""

    @abstractmethod
    def estimate_size(self) -> int:
        """Number of elements left to traverse."""


class ListContract(ABC):
    """Ordered, index-addressable container of elements.

    Positions are zero based. ``hash_code`` is the order-sensitive polynomial
    hash ``h = 31 * h + hash(e)`` over all elements starting from ``h = 1``,
    truncated to 32 bits, so two implementations holding equal contents hash
    equally.
    """

    @abstractmethod
    def size(self) -> int:
        ...

    @abstractmethod
    def is_empty(self) -> bool:
        ...

    @abstractmethod
    def contains(self, value: object) -> bool:
        ...

    @abstractmethod
    def iterator(self) -> Iterator[Element]:
        """Iterate over all elements in order."""

    @abstractmethod
    def to_array(self) -> ObjectArray:
        """Return a new list holding all elements in order."""

    @abstractmethod
    def to_array_into(self, array: ObjectArray) -> ObjectArray:
        """Copy the elements into ``array`` if it is large enough.

        When ``array`` has room, elements are written from position 0, the slot
        right after the last element (if any) is set to ``None`` and ``array``
        itself is returned. Otherwise a new list is returned.
        """

    @abstractmethod
    def append(self, value: Element) -> bool:
        """Add ``value`` at the end. Always returns True."""

    @abstractmethod
    def remove(self, value: object) -> bool:
        """Remove the first occurrence of ``value``; False if absent."""

    @abstractmethod
    def contains_all(self, values: Bulk) -> bool:
        ...

    @abstractmethod
    def extend(self, values: Bulk) -> bool:
        """Append all ``values``; True if the container changed."""

    @abstractmethod
    def insert_all(self, index: Index, values: Bulk) -> bool:
        """Insert all ``values`` starting at ``index``; True if changed."""

    @abstractmethod
    def remove_all(self, values: Bulk) -> bool:
        """Remove every element contained in ``values``; True if changed."""

    @abstractmethod
    def retain_all(self, values: Bulk) -> bool:
        """Keep only elements contained in ``values``; True if changed."""

    @abstractmethod
    def replace_all(self, transform: Transform) -> None:
        ...

    @abstractmethod
    def sort(self, comparator: Comparator) -> None:
        """Stable sort using a three-way ``comparator``."""

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def equals(self, other: object) -> bool:
        """True if ``other`` is a list contract with equal contents."""

    @abstractmethod
    def hash_code(self) -> int:
        ...

    @abstractmethod
    def get(self, index: Index) -> Element:
        ...

    @abstractmethod
    def set(self, index: Index, value: Element) -> Element:
        """Replace the element at ``index`` and return the previous one."""

    @abstractmethod
    def insert(self, index: Index, value: Element) -> None:
        ...

    @abstractmethod
    def pop(self, index: Index) -> Element:
        """Remove and return the element at ``index``."""

    @abstractmethod
    def index_of(self, value: object) -> int:
        """First position of ``value``, or -1."""

    @abstractmethod
    def last_index_of(self, value: object) -> int:
        """Last position of ``value``, or -1."""

    @abstractmethod
    def list_iterator(self) -> Iterator[Element]:
        ...

    @abstractmethod
    def list_iterator_from(self, index: Index) -> Iterator[Element]:
        """Iterate from ``index`` to the end."""

    @abstractmethod
    def sub_list(self, start: Index, stop: Index) -> list[Element]:
        """Elements in ``[start, stop)``.

        Raises:
            IndexError: If either bound is outside ``[0, size()]``
            ValueError: If ``start > stop``
        """

    @abstractmethod
    def cursor(self) -> Cursor:
        ...


def natural_order(left: Any, right: Any) -> int:
    """Three-way comparison using the elements' natural ordering."""
    return (left > right) - (left < right)


def increment(value: int) -> int:
    return value + 1


def list_hash(values) -> int:
    """Order-sensitive 32-bit hash shared by all contract implementations."""
    h = 1
    for value in values:
        h = (31 * h + (0 if value is None else hash(value))) & 0xFFFFFFFF
    return h


def check_position(index: int, size: int, *, inclusive: bool = False) -> None:
    """Raise IndexError if ``index`` is not a valid position.

    Args:
        index: Position to check
        size: Current container size
        inclusive: Allow ``index == size`` (insertion points, slice bounds)
    """
    limit = size + 1 if inclusive else size
    if not 0 <= index < limit:
        raise IndexError(f"Index: {index}, Size: {size}")


def sub_list_bounds(start: int, stop: int, size: int) -> tuple[int, int]:
    """Validate ``sub_list`` bounds, raising the contract's exceptions."""
    check_position(start, size, inclusive=True)
    check_position(stop, size, inclusive=True)
    if start > stop:
        raise ValueError(f"start({start}) > stop({stop})")
    return start, stop
