# primeforge/rand.py
# Entropy plumbing: a thin wrapper over a byte source, the candidate
# generator and the stream of Miller-Rabin bases.

from __future__ import annotations

import secrets
from typing import Callable, Iterator, Optional

from .errors import RandomSourceFailure

# rejection sampling gives up after this many out-of-range draws;
# an honest source needs more than a handful with probability < 2^-128
_MAX_REJECTIONS = 128


class RandomSource:
    """
    Integer sampling on top of a cryptographically secure byte source.

    `token_bytes` is any callable returning exactly n random bytes; it
    defaults to `secrets.token_bytes`. Sources shared between racing
    threads must be thread-safe (the default one is).
    """

    def __init__(self, token_bytes: Optional[Callable[[int], bytes]] = None):
        self._token_bytes = token_bytes or secrets.token_bytes

    def read(self, n: int) -> bytes:
        try:
            data = self._token_bytes(n)
        except Exception as exc:
            raise RandomSourceFailure(f"entropy source failed to supply {n} bytes") from exc
        if not isinstance(data, (bytes, bytearray)) or len(data) != n:
            got = len(data) if isinstance(data, (bytes, bytearray)) else type(data).__name__
            raise RandomSourceFailure(f"entropy source returned {got} instead of {n} bytes")
        return bytes(data)

    def randbits(self, k: int) -> int:
        if k <= 0:
            return 0
        nbytes = (k + 7) // 8
        x = int.from_bytes(self.read(nbytes), "big")
        return x >> (nbytes * 8 - k)

    def randbelow(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError("upper bound must be positive")
        k = n.bit_length()
        for _ in range(_MAX_REJECTIONS):
            x = self.randbits(k)
            if x < n:
                return x
        raise RandomSourceFailure(
            f"entropy source produced {_MAX_REJECTIONS} consecutive values >= {n}"
        )

    def randrange(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        if high <= low:
            raise ValueError(f"empty range [{low}, {high})")
        return low + self.randbelow(high - low)


def ensure_source(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else RandomSource()


def random_odd(bits: int, rng: RandomSource) -> int:
    """Random odd integer of exactly `bits` bits (top and bottom bit forced)."""
    n = rng.randbits(bits)
    n |= (1 << (bits - 1))   # exact bit-length
    n |= 1                   # odd
    return n


def randoms(low: int, high: int, amount: int, rng: RandomSource,
            appended: Optional[int] = None) -> Iterator[int]:
    """
    Yield `amount` integers drawn from [low, high). If `appended` is given it
    takes the place of the last draw, so the stream length never changes.
    """
    for i in range(amount):
        if appended is not None and i == amount - 1:
            yield appended
        else:
            yield rng.randrange(low, high)
