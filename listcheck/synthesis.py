"""Random argument synthesis for contract operations.

Each ``ParamKind`` maps to one generator in ``ArgumentSynthesizer.GENERATORS``.
A generator receives the synthesizer, the session RNG and the current container
size. Supporting a new parameter kind means adding a row to that table.
"""

import random
from typing import Any, Callable, Dict

from listcheck.contract import ParamKind, increment, natural_order
from listcheck.errors import UnsupportedParameterError
from listcheck.operations import Operation

# Elements are drawn from the signed 32-bit range
ELEMENT_MIN = -(2 ** 31)
ELEMENT_MAX = 2 ** 31 - 1

DEFAULT_MAX_ARRAY_LENGTH = 10000


def random_element(rng: random.Random) -> int:
    """Uniform random element value."""
    return rng.randint(ELEMENT_MIN, ELEMENT_MAX)


def random_elements(rng: random.Random, count: int) -> list[int]:
    return [random_element(rng) for _ in range(count)]


def _random_below(rng: random.Random, bound: int) -> int:
    """Uniform integer in ``[0, bound)``; 0 when the range is empty."""
    return rng.randrange(bound) if bound > 0 else 0


class ArgumentSynthesizer:
    """Produces random arguments satisfying each parameter kind.

    Args:
        max_array_length: Exclusive upper bound for pre-allocated arrays
    """

    def __init__(self, max_array_length: int = DEFAULT_MAX_ARRAY_LENGTH):
        self.max_array_length = max_array_length

    def _index(self, rng: random.Random, size: int) -> int:
        if size <= 0:
            raise ValueError("Cannot pick an index in an empty container")
        return rng.randrange(size)

    def _element(self, rng: random.Random, size: int) -> int:
        return random_element(rng)

    def _bulk(self, rng: random.Random, size: int) -> list[int]:
        return random_elements(rng, _random_below(rng, size))

    def _comparator(self, rng: random.Random, size: int) -> Callable[[Any, Any], int]:
        return natural_order

    def _transform(self, rng: random.Random, size: int) -> Callable[[int], int]:
        return increment

    def _array(self, rng: random.Random, size: int) -> list[None]:
        return [None] * _random_below(rng, self.max_array_length)

    GENERATORS: Dict[ParamKind, Callable[["ArgumentSynthesizer", random.Random, int], Any]] = {
        ParamKind.INDEX: _index,
        ParamKind.ELEMENT: _element,
        ParamKind.BULK: _bulk,
        ParamKind.COMPARATOR: _comparator,
        ParamKind.TRANSFORM: _transform,
        ParamKind.ARRAY: _array,
    }

    def supports(self, kind: ParamKind) -> bool:
        return kind in self.GENERATORS

    def synthesize(self, kind: ParamKind, current_size: int, rng: random.Random) -> Any:
        """Generate one argument.

        Args:
            kind: Parameter kind to satisfy
            current_size: Size of the containers at this step
            rng: Session random generator

        Returns:
            Generated value

        Raises:
            KeyError: If ``kind`` has no generator
        """
        generator = self.GENERATORS[kind]
        return generator(self, rng, current_size)

    def synthesize_arguments(
        self, operation: Operation, current_size: int, rng: random.Random
    ) -> tuple:
        """Generate the full argument tuple for an operation.

        Raises:
            UnsupportedParameterError: If any parameter kind has no generator
        """
        args = []
        for param in operation.params:
            if not self.supports(param.kind):
                raise UnsupportedParameterError(operation.name, param.name, param.annotation)
            args.append(self.synthesize(param.kind, current_size, rng))
        return tuple(args)
