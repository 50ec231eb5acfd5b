"""
Explicit random number streams.

Generation never touches the global `random` or `numpy.random` state.
Instead an immutable RngState is threaded through every call: each draw
returns the drawn value together with the next state, so the same starting
state always replays the same dungeon.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")


@dataclass(frozen=True)
class RngState:
    """
    A snapshot of a PCG64 generator.

    The snapshot is a plain value: draws never mutate it, they return a new
    RngState alongside the result.
    """

    state: int
    inc: int
    # Half of a 64-bit draw kept back for the next 32-bit draw
    has_uint32: int = 0
    uinteger: int = 0

    @classmethod
    def from_seed(cls, seed: int) -> "RngState":
        """Create the initial state for an integer seed."""
        return cls._from_bit_generator(np.random.PCG64(seed))

    @classmethod
    def _from_bit_generator(cls, bit_generator: np.random.PCG64) -> "RngState":
        snapshot = bit_generator.state
        return cls(
            state=int(snapshot["state"]["state"]),
            inc=int(snapshot["state"]["inc"]),
            has_uint32=int(snapshot["has_uint32"]),
            uinteger=int(snapshot["uinteger"]),
        )

    def _generator(self) -> np.random.Generator:
        bit_generator = np.random.PCG64()
        bit_generator.state = {
            "bit_generator": "PCG64",
            "state": {"state": self.state, "inc": self.inc},
            "has_uint32": self.has_uint32,
            "uinteger": self.uinteger,
        }
        return np.random.Generator(bit_generator)

    @classmethod
    def _after(cls, generator: np.random.Generator) -> "RngState":
        return cls._from_bit_generator(generator.bit_generator)

    def randint(self, low: int, high: int) -> Tuple[int, "RngState"]:
        """Draw an integer uniformly from [low, high], both ends included."""
        if low > high:
            raise ValueError(f"empty range [{low}, {high}]")
        generator = self._generator()
        value = int(generator.integers(low, high, endpoint=True))
        return value, self._after(generator)

    def random(self) -> Tuple[float, "RngState"]:
        """Draw a float uniformly from [0, 1)."""
        generator = self._generator()
        value = float(generator.random())
        return value, self._after(generator)

    def choice(self, items: Sequence[T]) -> Tuple[T, "RngState"]:
        """Pick one item uniformly."""
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        index, next_state = self.randint(0, len(items) - 1)
        return items[index], next_state

    def weighted_choice(
        self, items: Sequence[T], weights: Sequence[float]
    ) -> Tuple[T, "RngState"]:
        """
        Pick one item with probability proportional to its weight.

        Raises:
            ValueError: If the sequences differ in length, a weight is
                negative, or every weight is zero.
        """
        if len(items) != len(weights):
            raise ValueError("items and weights must have the same length")
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        probabilities = np.asarray(weights, dtype=float)
        if (probabilities < 0).any():
            raise ValueError("weights must not be negative")
        total = probabilities.sum()
        if total <= 0:
            raise ValueError("at least one weight must be positive")
        generator = self._generator()
        index = int(generator.choice(len(items), p=probabilities / total))
        return items[index], self._after(generator)

    def shuffled(self, items: Sequence[T]) -> Tuple[List[T], "RngState"]:
        """Return a shuffled copy of items."""
        generator = self._generator()
        order = generator.permutation(len(items))
        return [items[int(i)] for i in order], self._after(generator)

    def split(self) -> Tuple["RngState", "RngState"]:
        """
        Derive an independent child stream.

        Returns:
            (child, next_state): the child can be handed to an unrelated
            computation (e.g. another level) while the caller continues
            with next_state.
        """
        generator = self._generator()
        child_seed = int(generator.integers(0, 2**63 - 1))
        return RngState.from_seed(child_seed), self._after(generator)


def as_rng_state(seed: Any) -> RngState:
    """Accept either an integer seed or an existing RngState."""
    if isinstance(seed, RngState):
        return seed
    if isinstance(seed, (int, np.integer)) and not isinstance(seed, bool):
        return RngState.from_seed(int(seed))
    raise TypeError(f"expected an int seed or RngState, got {type(seed).__name__}")
