"""Operation catalog built by introspecting a contract class.

The harness never lists operations by hand. ``enumerate_operations`` walks the
abstract methods of a contract (``ListContract`` by default), reads their type
hints and classifies every parameter into a ``ParamKind`` and every return
annotation into a ``ReturnShape``. The result is cached per contract class for
the lifetime of the process.
"""

import collections.abc
import functools
import inspect
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Annotated, Optional

from listcheck.contract import Cursor, ListContract, ParamKind
from listcheck.logging_config import get_logger

logger = get_logger(__name__)


class ReturnShape(str, Enum):
    """How the oracle compares the values returned by an operation.

    Attributes:
        SCALAR: None-ness must match, then ``==``
        ARRAY: Element-wise equality
        LAZY: Iterator consumed pairwise, lengths must match
        OPAQUE: Never compared; only absence of failure is checked
        VOID: Returns nothing
    """
    SCALAR = "scalar"
    ARRAY = "array"
    LAZY = "lazy"
    OPAQUE = "opaque"
    VOID = "void"


# Plain annotations that map to a kind without Annotated metadata.
PLAIN_PARAMETER_KINDS: dict[Any, ParamKind] = {
    int: ParamKind.INDEX,
    object: ParamKind.ELEMENT,
}

LAZY_ORIGINS = (
    collections.abc.Iterator,
    collections.abc.Generator,
)

ARRAY_ORIGINS = (list, tuple)


@dataclass(frozen=True)
class Parameter:
    """One declared parameter of an operation."""
    name: str
    annotation: Any
    kind: ParamKind

    @property
    def type_name(self) -> str:
        if self.kind is not ParamKind.UNSUPPORTED and typing.get_origin(self.annotation) is Annotated:
            return self.kind.value.title()
        return getattr(self.annotation, "__name__", repr(self.annotation))


@dataclass(frozen=True)
class Operation:
    """A single operation of the contract under test."""
    name: str
    params: tuple[Parameter, ...]
    return_shape: ReturnShape

    @property
    def param_kinds(self) -> tuple[ParamKind, ...]:
        return tuple(p.kind for p in self.params)

    @property
    def signature(self) -> str:
        """Display form, e.g. ``insert(Index, Element)``."""
        return f"{self.name}({', '.join(p.type_name for p in self.params)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "params": [
                {"name": p.name, "type": p.type_name, "kind": p.kind.value}
                for p in self.params
            ],
            "return_shape": self.return_shape.value,
        }

    def __str__(self) -> str:
        return self.signature


def classify_parameter(annotation: Any) -> ParamKind:
    """Map a parameter annotation to the kind of argument to synthesize.

    Args:
        annotation: Type hint as returned by ``get_type_hints(include_extras=True)``

    Returns:
        The declared ParamKind, or ParamKind.UNSUPPORTED
    """
    if typing.get_origin(annotation) is Annotated:
        for meta in annotation.__metadata__:
            if isinstance(meta, ParamKind):
                return meta
        annotation = typing.get_args(annotation)[0]

    try:
        return PLAIN_PARAMETER_KINDS.get(annotation, ParamKind.UNSUPPORTED)
    except TypeError:
        # Unhashable annotation objects
        return ParamKind.UNSUPPORTED


def classify_return(annotation: Any) -> ReturnShape:
    """Map a return annotation (with Annotated metadata stripped) to a shape."""
    if annotation is None or annotation is type(None):
        return ReturnShape.VOID

    if inspect.isclass(annotation) and issubclass(annotation, Cursor):
        return ReturnShape.OPAQUE

    origin = typing.get_origin(annotation) or annotation
    if origin in LAZY_ORIGINS:
        return ReturnShape.LAZY
    if origin in ARRAY_ORIGINS:
        return ReturnShape.ARRAY

    return ReturnShape.SCALAR


def _abstract_members(contract: type) -> dict[str, Any]:
    """Abstract methods of ``contract`` in declaration order, base classes first."""
    abstract = getattr(contract, "__abstractmethods__", frozenset())
    members: dict[str, Any] = {}
    for klass in reversed(contract.__mro__):
        for name, member in vars(klass).items():
            if name in abstract and callable(member):
                members[name] = member
    return members


def _build_operation(name: str, method: Any) -> Operation:
    hints = typing.get_type_hints(method, include_extras=True)
    plain_hints = typing.get_type_hints(method)

    params = []
    for param in list(inspect.signature(method).parameters.values())[1:]:
        annotation = hints.get(param.name, param.annotation)
        params.append(Parameter(param.name, annotation, classify_parameter(annotation)))

    return Operation(
        name=name,
        params=tuple(params),
        return_shape=classify_return(plain_hints["return"]) if "return" in plain_hints else ReturnShape.SCALAR,
    )


@functools.lru_cache(maxsize=None)
def enumerate_operations(contract: type = ListContract) -> tuple[Operation, ...]:
    """Enumerate every operation declared by a contract class.

    Args:
        contract: Abstract contract class (default: ListContract)

    Returns:
        Operations in declaration order

    Raises:
        TypeError: If ``contract`` declares no abstract operations
    """
    members = _abstract_members(contract)
    if not members:
        raise TypeError(f"{contract.__name__} declares no abstract operations")

    operations = tuple(_build_operation(name, method) for name, method in members.items())

    unsupported = [op.signature for op in operations if ParamKind.UNSUPPORTED in op.param_kinds]
    if unsupported:
        logger.warning(
            f"{contract.__name__} has operations with unsupported parameter types: "
            f"{', '.join(unsupported)}"
        )

    logger.debug(f"Enumerated {len(operations)} operations on {contract.__name__}")
    return operations


def find_operation(name: str, contract: type = ListContract) -> Optional[Operation]:
    """Look up an operation by name."""
    for operation in enumerate_operations(contract):
        if operation.name == name:
            return operation
    return None
