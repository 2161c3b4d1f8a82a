# primeforge/sieve.py
# Small-prime trial division.
# - One process-wide table of the primes below SMALL_PRIME_LIMIT
# - SieveState keeps candidate residues and updates them per step
#   instead of re-dividing the big candidate

from __future__ import annotations

import threading

import numpy as np
from sympy import primerange

from . import config

_TABLE = None
_TABLE_LOCK = threading.Lock()


def small_primes() -> np.ndarray:
    """The shared, read-only table of small primes (built on first use)."""
    global _TABLE
    if _TABLE is None:
        with _TABLE_LOCK:
            if _TABLE is None:
                table = np.fromiter(primerange(2, config.SMALL_PRIME_LIMIT), dtype=np.int64)
                table.setflags(write=False)
                _TABLE = table
    return _TABLE


def is_small_prime(n: int) -> bool:
    """Membership in the small-prime table."""
    table = small_primes()
    if n < 2 or n > int(table[-1]):
        return False
    i = int(np.searchsorted(table, n))
    return i < len(table) and int(table[i]) == n


def trial_division(n: int) -> bool:
    """True if n has no small-prime factor other than itself."""
    for p in small_primes().tolist():
        if n % p == 0:
            return n == p
    return True


class SieveState:
    """
    Residues of a candidate modulo every small prime.

    `advance()` moves the candidate forward by `step` and updates each
    residue with one addition mod p; the candidate itself is never divided
    again. Owned by a single search, never shared.
    """

    def __init__(self, candidate: int, step: int = 2):
        self.primes = small_primes()
        self.candidate = candidate
        self.step = step
        self.residues = np.array([candidate % p for p in self.primes.tolist()], dtype=np.int64)
        self._step_residues = np.array([step % p for p in self.primes.tolist()], dtype=np.int64)

    def advance(self) -> int:
        self.candidate += self.step
        self.residues += self._step_residues
        np.remainder(self.residues, self.primes, out=self.residues)
        return self.candidate

    def has_small_factor(self) -> bool:
        hits = np.flatnonzero(self.residues == 0)
        if hits.size == 0:
            return False
        # a zero residue against the candidate itself is not a factor
        return any(int(self.primes[i]) != self.candidate for i in hits)
