# primeforge/prime.py
# Plain probable primes of an exact bit length.

from __future__ import annotations

import logging
from typing import Optional

from .errors import GenerationExhausted
from .primality import baillie_psw, check_probable_prime, resolve_rounds
from .rand import RandomSource, ensure_source
from .search import (
    SearchStrategy, attempt_budget, check_bit_length, check_workers,
    prime_attempts, race,
)

logger = logging.getLogger(__name__)


def generate_prime(bit_length: int, rounds: Optional[int] = None,
                   rng: Optional[RandomSource] = None, *,
                   strategy: SearchStrategy = SearchStrategy.INCREMENTAL,
                   workers: Optional[int] = None,
                   max_attempts: Optional[int] = None) -> int:
    """
    Random probable prime with exactly `bit_length` bits.

    Args:
      bit_length: size of the result, MIN_BIT_LENGTH..MAX_BIT_LENGTH.
      rounds: Miller-Rabin rounds before the Lucas test (default by size).
      rng: entropy source (default: OS CSPRNG).
      strategy: RANDOM redraws every candidate, INCREMENTAL steps by 2.
      workers: threads racing for the first hit (default config.WORKERS).
      max_attempts: candidate budget shared by all workers.

    Raises:
      InvalidBitLength, InvalidParameters, RandomSourceFailure,
      GenerationExhausted.
    """
    check_bit_length(bit_length)
    rounds = resolve_rounds(rounds, bit_length)
    workers = check_workers(workers)
    budget = attempt_budget(bit_length, max_attempts=max_attempts)
    rng = ensure_source(rng)

    p = race(lambda: prime_attempts(bit_length, rounds, rng, strategy), budget, workers)
    if p is None:
        logger.warning("%d-bit prime search exhausted %d candidates", bit_length, budget.used)
        raise GenerationExhausted(bit_length, budget.used)
    logger.debug("%d-bit prime found after %d candidates (%s)",
                 bit_length, budget.used, strategy.value)
    return p


def check(n: int, rounds: Optional[int] = None, rng: Optional[RandomSource] = None) -> bool:
    """True if n passes trial division, Miller-Rabin and strong Lucas."""
    return bool(check_probable_prime(n, rounds, rng))


def strong_check(n: int) -> bool:
    """Deterministic Baillie-PSW check, no random bases."""
    return baillie_psw(n)
