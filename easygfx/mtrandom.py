"""Mersenne Twister (MT19937) generator and module-level random helpers."""

from __future__ import annotations

import time
from collections.abc import Sequence
from itertools import count

__all__ = [
    "MTRandom",
    "mtsrand",
    "mtirand",
    "mtdrand",
    "randomize",
    "random",
    "randomf",
]

_N = 624
_M = 397
_MASK32 = 0xFFFFFFFF
_UPPER_MASK = 0x80000000
_LOWER_MASK = 0x7FFFFFFF
_MATRIX_A = 0x9908B0DF
_DEFAULT_SEED = 19650218


def _twist(u: int, v: int) -> int:
    mixed = (u & _UPPER_MASK) | (v & _LOWER_MASK)
    return (mixed >> 1) ^ (_MATRIX_A if v & 1 else 0)


class MTRandom:
    """A 32-bit Mersenne Twister.

    Built with no arguments it uses the reference default seed; ``seed``
    initialises from a single integer and ``key`` from a sequence of
    32-bit words.
    """

    def __init__(self, seed: int | None = None, key: Sequence[int] | None = None) -> None:
        if seed is not None and key is not None:
            raise ValueError("give either a seed or a key, not both")
        self._state = [0] * _N
        self._left = 1
        self._next = 0
        if key is not None:
            self._init_by_key(key)
        elif seed is not None:
            self._init(seed)
        else:
            self._init()

    def _init(self, seed: int = _DEFAULT_SEED) -> None:
        state = self._state
        state[0] = seed & _MASK32
        for j in range(1, _N):
            prev = state[j - 1]
            state[j] = (1812433253 * (prev ^ (prev >> 30)) + j) & _MASK32

    def _init_by_key(self, key: Sequence[int]) -> None:
        words = [word & _MASK32 for word in key]
        if not words:
            raise ValueError("key must hold at least one word")
        self._init()
        state = self._state
        i, j = 1, 0
        for _ in range(max(_N, len(words))):
            prev = state[i - 1]
            state[i] = ((state[i] ^ ((prev ^ (prev >> 30)) * 1664525)) + words[j] + j) & _MASK32
            i += 1
            j += 1
            if i >= _N:
                state[0] = state[_N - 1]
                i = 1
            if j >= len(words):
                j = 0
        for _ in range(_N - 1):
            prev = state[i - 1]
            state[i] = ((state[i] ^ ((prev ^ (prev >> 30)) * 1566083941)) - i) & _MASK32
            i += 1
            if i >= _N:
                state[0] = state[_N - 1]
                i = 1
        state[0] = 0x80000000

    def _next_state(self) -> None:
        state = self._state
        for k in range(_N - _M):
            state[k] = state[k + _M] ^ _twist(state[k], state[k + 1])
        for k in range(_N - _M, _N - 1):
            state[k] = state[k + _M - _N] ^ _twist(state[k], state[k + 1])
        state[_N - 1] = state[_M - 1] ^ _twist(state[_N - 1], state[0])
        self._left = _N
        self._next = 0

    def reset(self, seed: int) -> None:
        """Reseed from a single integer and regenerate the state at once."""
        self._init(seed)
        self._next_state()

    def rand(self) -> int:
        """Return the next 32-bit unsigned integer."""
        self._left -= 1
        if self._left == 0:
            self._next_state()
        y = self._state[self._next]
        self._next += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _MASK32

    def real(self) -> float:
        """Return a float in [0, 1) with 32-bit resolution."""
        return self.rand() / 4294967296.0

    def res53(self) -> float:
        """Return a float in [0, 1) with 53-bit resolution."""
        a = self.rand() >> 5
        b = self.rand() >> 6
        return (a * 67108864.0 + b) / 9007199254740992.0


_shared = MTRandom()
_randomize_counter = count()


def mtsrand(seed: int) -> None:
    """Reseed the shared generator."""
    _shared.reset(seed)


def mtirand() -> int:
    """Next 32-bit integer from the shared generator."""
    return _shared.rand()


def mtdrand() -> float:
    """Next float in [0, 1) from the shared generator."""
    return _shared.real()


def randomize() -> None:
    """Reseed the shared generator from the clock; each call differs."""
    mtsrand(int(time.time()) + next(_randomize_counter))


def random(n: int = 0) -> int:
    """Return a random integer in [0, n), or any 32-bit integer when n is 0."""
    if n < 0:
        raise ValueError("n must not be negative")
    if n == 0:
        return mtirand()
    return int(mtdrand() * n)


def randomf() -> float:
    """Return a random float in [0, 1)."""
    return mtdrand()