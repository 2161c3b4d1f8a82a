import random
import threading

import pytest

from primeforge import RandomSource


class SeededBytes:
    """Reproducible, thread-safe byte source for tests."""

    def __init__(self, seed):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def __call__(self, n):
        with self._lock:
            return self._rng.randbytes(n)


@pytest.fixture
def seeded():
    def make(seed=1234):
        return RandomSource(SeededBytes(seed))
    return make


@pytest.fixture
def zero_source():
    return RandomSource(lambda n: bytes(n))
