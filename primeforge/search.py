# primeforge/search.py
# Bounded search loops
# - attempt budget shared by every worker of one request
# - random-redraw and odd-stepping candidate streams
# - thread race: first hit wins, the rest stop between attempts

from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, TypeVar

from . import config
from .errors import InvalidBitLength, InvalidParameters
from .primality import passes_compound_test
from .rand import RandomSource, random_odd
from .sieve import SieveState, trial_division

logger = logging.getLogger(__name__)

T = TypeVar("T")
Attempt = Callable[[], Optional[T]]


class SearchStrategy(enum.Enum):
    RANDOM = "random"            # fresh draw per candidate
    INCREMENTAL = "incremental"  # step by 2 from one draw, sieve updated in place


def check_bit_length(bit_length: int, minimum: int = config.MIN_BIT_LENGTH,
                     maximum: int = config.MAX_BIT_LENGTH) -> int:
    if isinstance(bit_length, bool) or not isinstance(bit_length, int):
        raise InvalidBitLength(bit_length, minimum, maximum)
    if not minimum <= bit_length <= maximum:
        raise InvalidBitLength(bit_length, minimum, maximum)
    return bit_length


def check_workers(workers: Optional[int]) -> int:
    if workers is None:
        return config.WORKERS
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise InvalidParameters(f"workers must be a positive integer, got {workers!r}")
    return workers


def attempt_budget(bit_length: int, scale: int = 1, max_attempts: Optional[int] = None) -> "AttemptBudget":
    """Default budget is ATTEMPTS_PER_BIT per bit (times `scale`), floored at MIN_ATTEMPTS."""
    if max_attempts is None:
        max_attempts = max(config.MIN_ATTEMPTS, config.ATTEMPTS_PER_BIT * bit_length * scale)
    elif isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise InvalidParameters(f"max_attempts must be a positive integer, got {max_attempts!r}")
    return AttemptBudget(max_attempts)


class AttemptBudget:
    """Candidate counter; safe to share between racing threads."""

    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0
        self._lock = threading.Lock()

    def take(self) -> bool:
        with self._lock:
            if self.used >= self.limit:
                return False
            self.used += 1
            return True


# ---------- Candidate streams ----------

def prime_attempts(bits: int, rounds: int, rng: RandomSource,
                   strategy: SearchStrategy = SearchStrategy.INCREMENTAL) -> Attempt[int]:
    """
    Build a one-candidate-per-call tester. Each call returns the prime it
    found or None. The returned callable owns its state; give every worker
    its own.
    """
    if strategy is SearchStrategy.RANDOM:
        def attempt() -> Optional[int]:
            n = random_odd(bits, rng)
            if trial_division(n) and passes_compound_test(n, rounds, rng):
                return n
            return None
        return attempt

    state: Optional[SieveState] = None

    def attempt() -> Optional[int]:
        nonlocal state
        if state is not None:
            state.advance()
        if state is None or state.candidate.bit_length() > bits:
            # fell off the top of the range: reseed
            state = SieveState(random_odd(bits, rng))
        if state.has_small_factor():
            return None
        if passes_compound_test(state.candidate, rounds, rng):
            return state.candidate
        return None
    return attempt


# ---------- Drivers ----------

def run_search(attempt: Attempt[T], budget: AttemptBudget,
               cancel: Optional[threading.Event] = None) -> Optional[T]:
    """Call `attempt` until it yields a value, the budget runs out or `cancel` is set."""
    while cancel is None or not cancel.is_set():
        if not budget.take():
            return None
        found = attempt()
        if found is not None:
            return found
    return None


def race(make_attempt: Callable[[], Attempt[T]], budget: AttemptBudget,
         workers: int = 1) -> Optional[T]:
    """
    Run `workers` independent searches over one shared budget and return
    the first hit. Losers notice the cancel flag before their next
    candidate. Errors from any worker propagate after the others stop.
    """
    if workers <= 1:
        return run_search(make_attempt(), budget)

    cancel = threading.Event()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(run_search, make_attempt(), budget, cancel)
                   for _ in range(workers)]
        try:
            for future in as_completed(futures):
                result = future.result()
                if result is not None:
                    logger.debug("race won after %d candidates; cancelling %d workers",
                                 budget.used, workers - 1)
                    return result
        finally:
            cancel.set()
    return None
