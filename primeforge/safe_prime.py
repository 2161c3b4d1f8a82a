# primeforge/safe_prime.py
# Safe primes p = 2q + 1 with q prime.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from . import config
from .errors import GenerationExhausted
from .primality import passes_compound_test, resolve_rounds
from .prime import check, strong_check
from .rand import RandomSource, ensure_source, random_odd
from .search import Attempt, attempt_budget, check_bit_length, check_workers, race
from .sieve import trial_division

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SafePrimePair:
    p: int
    q: int


def _safe_prime_attempts(bits: int, rounds: int, rng: RandomSource) -> Attempt[SafePrimePair]:
    # q stepping does not keep p's residues useful, so every attempt redraws
    def attempt() -> Optional[SafePrimePair]:
        q = random_odd(bits - 1, rng)
        p = 2 * q + 1
        if not (trial_division(q) and trial_division(p)):
            return None
        if passes_compound_test(q, rounds, rng) and passes_compound_test(p, rounds, rng):
            return SafePrimePair(p=p, q=q)
        return None
    return attempt


def generate_safe_prime(bit_length: int, rounds: Optional[int] = None,
                        rng: Optional[RandomSource] = None, *,
                        workers: Optional[int] = None,
                        max_attempts: Optional[int] = None) -> SafePrimePair:
    """
    Random safe prime p of exactly `bit_length` bits together with q = (p-1)/2.

    The default budget is the plain-prime budget scaled by `bit_length`,
    since both p and q must be prime at once.
    """
    check_bit_length(bit_length, minimum=config.SAFE_PRIME_MIN_BIT_LENGTH)
    rounds = resolve_rounds(rounds, bit_length)
    workers = check_workers(workers)
    budget = attempt_budget(bit_length, scale=bit_length, max_attempts=max_attempts)
    rng = ensure_source(rng)

    pair = race(lambda: _safe_prime_attempts(bit_length, rounds, rng), budget, workers)
    if pair is None:
        logger.warning("%d-bit safe prime search exhausted %d candidates", bit_length, budget.used)
        raise GenerationExhausted(bit_length, budget.used, what="safe prime")
    logger.debug("%d-bit safe prime found after %d candidates", bit_length, budget.used)
    return pair


def check_safe_prime(n: int, rounds: Optional[int] = None,
                     rng: Optional[RandomSource] = None) -> bool:
    """True if n and (n-1)/2 are both probable primes."""
    if n < 5 or n % 2 == 0:
        return False
    return check(n, rounds, rng) and check((n - 1) // 2, rounds, rng)


def strong_check_safe_prime(n: int) -> bool:
    """Baillie-PSW on both n and (n-1)/2."""
    if n < 5 or n % 2 == 0:
        return False
    return strong_check(n) and strong_check((n - 1) // 2)
