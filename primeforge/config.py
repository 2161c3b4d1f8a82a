# primeforge/config.py
# Tunables for prime generation. Anything read from the environment is
# parsed once at import time.

import os

MIN_BIT_LENGTH = 2
MAX_BIT_LENGTH = 16384

# p = 2q + 1 with q an odd prime starts at 7 (3 bits)
SAFE_PRIME_MIN_BIT_LENGTH = 3

# aux primes for the FIPS construction need room for 2*p1*p2 below 2^N
STRONG_PRIME_MIN_AUX_BITS = 3

# small-prime table: every prime below this limit
SMALL_PRIME_LIMIT = int(os.getenv("PRIMEFORGE_SMALL_PRIME_LIMIT", "2000"))

# retry budget
ATTEMPTS_PER_BIT = int(os.getenv("PRIMEFORGE_ATTEMPTS_PER_BIT", "100"))
MIN_ATTEMPTS     = int(os.getenv("PRIMEFORGE_MIN_ATTEMPTS", "1000"))

# default thread count for racing searches
WORKERS = int(os.getenv("PRIMEFORGE_WORKERS", "1"))

# Miller-Rabin rounds by candidate size (bits >= threshold -> rounds).
# FIPS 186-4 Appendix C.3 for random candidates; the < 100 bit row is the
# worst-case 4^-k bound for 2^-100.
MR_ROUNDS_TABLE = (
    (1536, 4),
    (512, 5),
    (100, 28),
    (0, 50),
)

# FIPS 186-4 Table B.1: prime bits -> (aux bits must exceed, aux bit sum must stay below)
FIPS_AUX_BOUNDS = {
    512:  (100, 496),
    1024: (140, 1007),
    1536: (170, 1518),
}

if SMALL_PRIME_LIMIT < 3:
    raise ValueError("PRIMEFORGE_SMALL_PRIME_LIMIT must be at least 3")
if ATTEMPTS_PER_BIT < 1 or MIN_ATTEMPTS < 1:
    raise ValueError("attempt budgets must be positive")
if WORKERS < 1:
    raise ValueError("PRIMEFORGE_WORKERS must be at least 1")
