"""Additive-feedback pseudo-random stream compatible with ``srandom()/random()``.

The generated test arrays must be identical from run to run and across
machines, so the shuffle and noise draws come from this explicit generator
state rather than ``np.random``. The stream is the classic trinomial
x**31 + x**3 + 1 generator:

    state[0]      = seed
    state[i]      = 16807 * state[i-1] mod (2**31 - 1)     for 1 <= i < 31
    state[f]     += state[r]   (mod 2**32),  output = state[f] >> 1

with the front pointer ``f`` starting three words ahead of the rear pointer
``r`` and the first 310 outputs discarded.
"""

from typing import List

import numpy as np

LEGACY_SEED = 0xDEADBEEF
RAND_MAX = 2**31 - 1

_DEGREE = 31
_SEPARATION = 3
_WARMUP = 10 * _DEGREE
_MASK32 = 0xFFFFFFFF


def _as_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class LegacyRandom:
    """One independent draw stream. Not shared between generation calls."""

    def __init__(self, seed: int = LEGACY_SEED):
        self.seed(seed)

    def seed(self, seed: int) -> None:
        seed &= _MASK32
        if seed == 0:
            seed = 1
        # Seed arithmetic happens on a signed 32-bit word.
        word = _as_int32(seed)
        state = [word & _MASK32]
        for _ in range(1, _DEGREE):
            hi = _trunc_div(word, 127773)
            lo = word - hi * 127773
            word = 16807 * lo - 2836 * hi
            if word < 0:
                word += RAND_MAX
            state.append(word & _MASK32)

        self._state: List[int] = state
        self._front = _SEPARATION
        self._rear = 0
        for _ in range(_WARMUP):
            self.next()

    def next(self) -> int:
        """Return the next value in ``[0, 2**31 - 1]``."""
        state = self._state
        val = (state[self._front] + state[self._rear]) & _MASK32
        state[self._front] = val
        self._front += 1
        if self._front >= _DEGREE:
            self._front = 0
            self._rear += 1
        else:
            self._rear += 1
            if self._rear >= _DEGREE:
                self._rear = 0
        return val >> 1

    def draws(self, n: int) -> np.ndarray:
        """Return the next ``n`` values as an int64 array."""
        return np.fromiter((self.next() for _ in range(n)), dtype=np.int64, count=n)

    def uniform(self, n: int) -> np.ndarray:
        """Return ``n`` floats in ``[0, 1]`` (``random() / RAND_MAX``)."""
        return self.draws(n).astype(np.float64) / float(RAND_MAX)
