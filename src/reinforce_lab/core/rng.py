"""Deterministic Lehmer (Park-Miller) random number generator.

The free functions are pure: every call takes the current seed and returns the
drawn value together with the seed to use next. ``RNG`` wraps them for callers
that prefer to keep the seed on an object.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import MutableSequence, Sequence, TypeVar

T_co = TypeVar("T_co")

MODULUS = 2147483647
MULTIPLIER = 48271


@dataclass(frozen=True, slots=True)
class RngResult:
    """A drawn value and the seed that follows it."""

    value: float | int
    next_seed: int


def normalize_seed(seed: float) -> int:
    """Map any number onto a valid, non-zero generator state."""
    normalized = abs(math.trunc(seed)) % MODULUS
    return 1 if normalized == 0 else normalized


def next_random(seed: float) -> RngResult:
    """Advance the generator once; ``value`` lies in the open interval (0, 1)."""
    current = normalize_seed(seed)
    next_seed = (current * MULTIPLIER) % MODULUS
    return RngResult(value=next_seed / MODULUS, next_seed=next_seed)


def random_int(seed: float, minimum: float, maximum: float) -> RngResult:
    """Draw an integer N such that ceil(minimum) <= N <= floor(maximum)."""
    result = next_random(seed)
    low = math.ceil(minimum)
    high = math.floor(maximum)
    value = math.floor(result.value * (high - low + 1)) + low
    return RngResult(value=value, next_seed=result.next_seed)


class RNG:
    """Stateful convenience wrapper that threads the seed between draws."""

    def __init__(self, seed: int) -> None:
        self._seed = normalize_seed(seed)

    @property
    def seed(self) -> int:
        """Return the seed the next draw will start from."""
        return self._seed

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        result = random_int(self._seed, a, b)
        self._seed = result.next_seed
        return int(result.value)

    def random(self) -> float:
        """Return the next random floating point number in the range (0.0, 1.0)."""
        result = next_random(self._seed)
        self._seed = result.next_seed
        return float(result.value)

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.randint(0, len(seq) - 1)]

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        for index in range(len(seq) - 1, 0, -1):
            swap = self.randint(0, index)
            seq[index], seq[swap] = seq[swap], seq[index]
