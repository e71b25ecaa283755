"""Random sources for the reward engine.

Every engine function takes an injected source exposing ``next()`` which
returns a uniform float in [0, 1). Engine code never seeds or owns one, so a
fixed sequence of values always replays the same trace.
"""

import random
from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np


_MASK_32 = 0xFFFFFFFF


class RngExhaustedError(RuntimeError):
    """Raised when a SequenceRng runs out of values."""


@runtime_checkable
class Rng(Protocol):
    """Uniform random source in [0, 1)."""

    def next(self) -> float:
        ...


class DefaultRng:
    """Random source backed by Python's Mersenne Twister."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()


class SeededRng:
    """
    Deterministic 32-bit mulberry32 generator.

    Produces the same stream for the same seed on every platform, which
    makes it suitable for replays shared between clients.
    """

    def __init__(self, seed: int):
        self._state = seed & _MASK_32

    @staticmethod
    def _imul(a: int, b: int) -> int:
        return (a * b) & _MASK_32

    def next(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK_32
        state = self._state
        t = self._imul(state ^ (state >> 15), state | 1)
        t ^= (t + self._imul(t ^ (t >> 7), state | 61)) & _MASK_32
        return ((t ^ (t >> 14)) & _MASK_32) / 4294967296


class SequenceRng:
    """
    Random source replaying a fixed list of values (for tests).

    Args:
        values: Values to return, in order.
        cycle: Restart from the beginning when exhausted instead of raising.
    """

    def __init__(self, values: Sequence[float], cycle: bool = False):
        self._values = list(values)
        self._cycle = cycle
        self._index = 0
        self._consumed = 0

    @property
    def consumed(self) -> int:
        """Number of values handed out so far."""
        return self._consumed

    def next(self) -> float:
        if self._index >= len(self._values):
            if not (self._cycle and self._values):
                raise RngExhaustedError(
                    f"SequenceRng exhausted after {len(self._values)} values"
                )
            self._index = 0
        value = self._values[self._index]
        self._index += 1
        self._consumed += 1
        return value


class NumpyRng:
    """Random source backed by ``numpy.random.Generator`` for bulk simulation."""

    def __init__(self, seed: Optional[int] = None):
        self._generator = np.random.default_rng(seed)

    @property
    def generator(self) -> np.random.Generator:
        return self._generator

    def next(self) -> float:
        return float(self._generator.random())


def rand_int(rng: Rng, min_incl: int, max_incl: int) -> int:
    """
    Draw an integer in [min_incl, max_incl] using one value from ``rng``.

    Raises:
        ValueError: If min_incl > max_incl.
    """
    if min_incl > max_incl:
        raise ValueError(f"rand_int: min_incl ({min_incl}) > max_incl ({max_incl})")
    span = max_incl - min_incl + 1
    return int(rng.next() * span) + min_incl


def make_rng(seed: Optional[int] = None) -> Rng:
    """Seeded mulberry32 source when a seed is given, otherwise a fresh default one."""
    if seed is None:
        return DefaultRng()
    return SeededRng(seed)
