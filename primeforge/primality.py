# primeforge/primality.py
# Compound probable-prime test
# - Miller-Rabin with random bases (base 2 always included)
# - strong Lucas test with Selfridge parameters
# Together this is Baillie-PSW plus extra random Miller-Rabin rounds.

from __future__ import annotations

import enum
import math
from typing import Optional, Tuple

from . import config
from .errors import InvalidParameters
from .rand import RandomSource, ensure_source, randoms
from .sieve import is_small_prime, small_primes, trial_division


class PrimalityVerdict(enum.Enum):
    COMPOSITE = "composite"
    PROBABLY_PRIME = "probably prime"

    def __bool__(self) -> bool:
        return self is PrimalityVerdict.PROBABLY_PRIME


# ---------- Utilities ----------

def is_square(n: int) -> bool:
    if n < 0:
        return False
    r = math.isqrt(n)
    return r * r == n


def jacobi(a: int, n: int) -> int:
    """Jacobi symbol (a/n), n odd positive."""
    if n <= 0 or n % 2 == 0:
        raise ValueError("n must be odd positive")
    a %= n
    result = 1
    while a:
        # factor out powers of two from a
        t = (a & -a)
        v2 = t.bit_length() - 1
        if v2:
            if v2 & 1 and n % 8 in (3, 5):
                result = -result
            a >>= v2
        # quadratic reciprocity
        if a % 4 == 3 and n % 4 == 3:
            result = -result
        a, n = n % a, a
    return result if n == 1 else 0


def rounds_for_bits(bits: int) -> int:
    """Miller-Rabin rounds for a candidate of the given size."""
    for threshold, rounds in config.MR_ROUNDS_TABLE:
        if bits >= threshold:
            return rounds
    return config.MR_ROUNDS_TABLE[-1][1]


def resolve_rounds(rounds: Optional[int], bits: int) -> int:
    if rounds is None:
        return rounds_for_bits(bits)
    if isinstance(rounds, bool) or not isinstance(rounds, int) or rounds < 1:
        raise InvalidParameters(f"rounds must be a positive integer, got {rounds!r}")
    return rounds


# ---------- Miller-Rabin ----------

def _miller_rabin_base(n: int, a: int) -> bool:
    """One strong Miller-Rabin round for base a (assuming n>2 odd)."""
    d = n - 1
    s = (d & -d).bit_length() - 1  # v2(n-1)
    d >>= s
    x = pow(a % n, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(s - 1):
        x = (x * x) % n
        if x == n - 1:
            return True
    return False


def miller_rabin(n: int, rounds: int, rng: RandomSource) -> bool:
    """
    `rounds` strong probable-prime tests on odd n >= 5. All bases but the
    last are uniform in [2, n-2]; the last is 2. Stops at the first witness.
    """
    for a in randoms(2, n - 1, rounds, rng, appended=2):
        if not _miller_rabin_base(n, a):
            return False
    return True


# ---------- Lucas ----------

def _selfridge_d(n: int) -> Optional[int]:
    """
    First D in 5, -7, 9, -11, ... with Jacobi(D|n) = -1, or None if some D
    shares a factor with n. n must be odd and not a perfect square.
    """
    D = 5
    while True:
        j = jacobi(D, n)
        if j == -1:
            return D
        if j == 0 and abs(D) != n:
            return None
        D = -D - 2 if D > 0 else -D + 2


def _lucas_sequence(n: int, P: int, Q: int, k: int) -> Tuple[int, int, int]:
    """(U_k, V_k, Q^k) modulo n by left-to-right binary chain; n odd."""
    D = P * P - 4 * Q
    U, V, Qk = 0, 2 % n, 1
    for bit in bin(k)[2:]:
        # double
        U = (U * V) % n
        V = (V * V - 2 * Qk) % n
        Qk = (Qk * Qk) % n
        if bit == '1':
            # add one; halving mod odd n
            U, V = P * U + V, D * U + P * V
            if U & 1:
                U += n
            if V & 1:
                V += n
            U = (U >> 1) % n
            V = (V >> 1) % n
            Qk = (Qk * Q) % n
    return U, V, Qk


def strong_lucas(n: int) -> bool:
    """Strong Lucas probable-prime test with Selfridge parameters (P=1)."""
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    if is_square(n):
        return False
    D = _selfridge_d(n)
    if D is None:
        return False
    P, Q = 1, (1 - D) // 4

    # n+1 = d*2^s
    d = n + 1
    s = (d & -d).bit_length() - 1
    d >>= s

    U, V, Qk = _lucas_sequence(n, P, Q, d)
    if U == 0 or V == 0:
        return True
    for _ in range(s - 1):
        V = (V * V - 2 * Qk) % n
        Qk = (Qk * Qk) % n
        if V == 0:
            return True
    return False


# ---------- Compound ----------

def passes_compound_test(n: int, rounds: int, rng: RandomSource) -> bool:
    """
    Probabilistic stages for a candidate that already survived trial
    division. Below the square of the sieve limit survivors are prime.
    """
    if n < config.SMALL_PRIME_LIMIT ** 2:
        return True
    if not miller_rabin(n, rounds, rng):
        return False
    return strong_lucas(n)


def check_probable_prime(candidate: int, rounds: Optional[int] = None,
                         rng: Optional[RandomSource] = None) -> PrimalityVerdict:
    """
    Classify `candidate`. Values below 2 are composite, small-table primes
    are prime outright, everything else goes through trial division,
    Miller-Rabin (`rounds` or the size-based default) and strong Lucas.
    """
    if isinstance(candidate, bool) or not isinstance(candidate, int):
        raise InvalidParameters(f"candidate must be an integer, got {candidate!r}")
    rounds = resolve_rounds(rounds, max(candidate, 0).bit_length())
    if candidate < 2:
        return PrimalityVerdict.COMPOSITE
    if is_small_prime(candidate):
        return PrimalityVerdict.PROBABLY_PRIME
    if not trial_division(candidate):
        return PrimalityVerdict.COMPOSITE
    if passes_compound_test(candidate, rounds, ensure_source(rng)):
        return PrimalityVerdict.PROBABLY_PRIME
    return PrimalityVerdict.COMPOSITE


def baillie_psw(n: int) -> bool:
    """
    Baillie-PSW: small-prime trial division, one strong base-2 round and
    a strong Lucas test. No randomness.
    """
    if n < 2:
        return False
    for p in small_primes()[:12].tolist():
        if n == p:
            return True
        if n % p == 0:
            return False
    if not _miller_rabin_base(n, 2):
        return False
    return strong_lucas(n)
