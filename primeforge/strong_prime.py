# primeforge/strong_prime.py
# FIPS 186-4 B.3.6-style primes with conditions on p-1 and p+1:
# p1 | p-1 and p2 | p+1 for auxiliary primes p1, p2.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from . import config
from .errors import GenerationExhausted, InvalidParameters
from .primality import passes_compound_test, resolve_rounds
from .rand import RandomSource, ensure_source
from .search import (
    AttemptBudget, SearchStrategy, attempt_budget, check_bit_length,
    prime_attempts, run_search,
)
from .sieve import SieveState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrongPrimeSpec:
    p: int
    p1: int   # divides p - 1
    p2: int   # divides p + 1
    r: int    # CRT residue: r = 1 mod 2*p1, r = -1 mod p2
    x: int    # random start of the sweep that found p


def check_aux_bit_length(bit_length: int, aux_bit_length: int, fips: bool = False) -> None:
    if isinstance(aux_bit_length, bool) or not isinstance(aux_bit_length, int):
        raise InvalidParameters(f"aux_bit_length must be an integer, got {aux_bit_length!r}")
    if aux_bit_length < config.STRONG_PRIME_MIN_AUX_BITS:
        raise InvalidParameters(
            f"aux_bit_length {aux_bit_length} below minimum {config.STRONG_PRIME_MIN_AUX_BITS}"
        )
    # 2*p1*p2 < 2^(2A+1) must fit below the width of [sqrt(2)*2^(N-1), 2^N)
    if 2 * aux_bit_length + 3 > bit_length:
        raise InvalidParameters(
            f"aux_bit_length {aux_bit_length} leaves no room in a {bit_length}-bit prime"
        )
    if fips:
        if bit_length not in config.FIPS_AUX_BOUNDS:
            raise InvalidParameters(
                f"FIPS 186-4 defines no auxiliary bounds for {bit_length}-bit primes"
            )
        min_aux, max_sum = config.FIPS_AUX_BOUNDS[bit_length]
        if aux_bit_length <= min_aux or 2 * aux_bit_length >= max_sum:
            raise InvalidParameters(
                f"FIPS 186-4 needs {min_aux} < aux bits and 2*aux bits < {max_sum} "
                f"for {bit_length}-bit primes, got {aux_bit_length}"
            )


def _check_exponent(e: Optional[int]) -> None:
    if e is None:
        return
    if isinstance(e, bool) or not isinstance(e, int) or e < 3 or e % 2 == 0:
        raise InvalidParameters(f"public exponent must be an odd integer >= 3, got {e!r}")


def _aux_prime(bits: int, rng: RandomSource, budget: AttemptBudget,
               exclude: Optional[int] = None) -> int:
    inner = prime_attempts(bits, resolve_rounds(None, bits), rng, SearchStrategy.RANDOM)

    def attempt() -> Optional[int]:
        n = inner()
        return None if n == exclude else n

    p = run_search(attempt, budget)
    if p is None:
        raise GenerationExhausted(bits, budget.used, what="auxiliary prime")
    return p


def crt_residue(p1: int, p2: int) -> int:
    """R with R = 1 (mod 2*p1) and R = -1 (mod p2); p1, p2 distinct odd primes."""
    m1 = 2 * p1
    return pow(p2, -1, m1) * p2 - pow(m1, -1, p2) * m1


def _sweep(start: int, stop: int, step: int, rounds: int, e: Optional[int],
           rng: RandomSource, budget: AttemptBudget) -> Optional[int]:
    """First acceptable candidate in start, start+step, ... below stop."""
    if start >= stop:
        return None
    sieve = SieveState(start, step=step)
    while sieve.candidate < stop:
        if not budget.take():
            return None
        y = sieve.candidate
        if (e is None or math.gcd(y - 1, e) == 1) and not sieve.has_small_factor() \
                and passes_compound_test(y, rounds, rng):
            return y
        sieve.advance()
    return None


def generate_strong_prime(bit_length: int, aux_bit_length: int,
                          rng: Optional[RandomSource] = None, *,
                          rounds: Optional[int] = None,
                          e: Optional[int] = None,
                          fips: bool = False,
                          max_attempts: Optional[int] = None) -> StrongPrimeSpec:
    """
    Probable prime p of `bit_length` bits with p-1 divisible by an
    `aux_bit_length`-bit prime p1 and p+1 divisible by another, p2.

    Candidates are Y = R (mod 2*p1*p2) in [sqrt(2)*2^(N-1), 2^N), swept
    from a random X up to 2^N and then from the bottom of the range back
    to X. When the whole progression holds no prime, p1 and p2 are
    redrawn; near the largest aux sizes the range holds only a few
    candidates per pair. With `e` set, candidates with gcd(Y-1, e) != 1
    are skipped (FIPS 186-4 B.3.6 step 6). With `fips=True` the Table B.1
    auxiliary bounds are enforced.

    `max_attempts` caps each auxiliary prime search and, separately, the
    candidates for p (every auxiliary pair drawn counts as one).
    """
    check_bit_length(bit_length)
    check_aux_bit_length(bit_length, aux_bit_length, fips)
    _check_exponent(e)
    rounds = resolve_rounds(rounds, bit_length)
    rng = ensure_source(rng)

    lower = math.isqrt(1 << (2 * bit_length - 1)) + 1   # ceil(sqrt(2) * 2^(N-1))
    upper = 1 << bit_length
    budget = attempt_budget(bit_length, max_attempts=max_attempts)
    pairs = 0

    while budget.take():
        pairs += 1
        p1 = _aux_prime(aux_bit_length, rng,
                        attempt_budget(aux_bit_length, max_attempts=max_attempts))
        p2 = _aux_prime(aux_bit_length, rng,
                        attempt_budget(aux_bit_length, max_attempts=max_attempts), exclude=p1)
        r = crt_residue(p1, p2)
        step = 2 * p1 * p2

        x = rng.randrange(lower, upper)
        start = x + ((r - x) % step)
        p = _sweep(start, upper, step, rounds, e, rng, budget)
        if p is None:
            # wrap around: the part of the progression below X
            p = _sweep(lower + ((r - lower) % step), start, step, rounds, e, rng, budget)
        if p is not None:
            logger.debug("%d-bit strong prime found after %d candidates, %d aux pairs",
                         bit_length, budget.used, pairs)
            return StrongPrimeSpec(p=p, p1=p1, p2=p2, r=r, x=x)

    logger.warning("%d-bit strong prime search exhausted %d candidates", bit_length, budget.used)
    raise GenerationExhausted(bit_length, budget.used, what="strong prime")
