import logging

from .errors import (
    GenerationExhausted,
    InvalidBitLength,
    InvalidParameters,
    PrimeForgeError,
    RandomSourceFailure,
)
from .primality import PrimalityVerdict, check_probable_prime
from .prime import check, generate_prime, strong_check
from .rand import RandomSource
from .safe_prime import (
    SafePrimePair,
    check_safe_prime,
    generate_safe_prime,
    strong_check_safe_prime,
)
from .search import SearchStrategy
from .strong_prime import StrongPrimeSpec, generate_strong_prime

__all__ = [
    "GenerationExhausted", "InvalidBitLength", "InvalidParameters",
    "PrimeForgeError", "RandomSourceFailure",
    "PrimalityVerdict", "check_probable_prime",
    "check", "generate_prime", "strong_check",
    "RandomSource",
    "SafePrimePair", "check_safe_prime", "generate_safe_prime", "strong_check_safe_prime",
    "SearchStrategy",
    "StrongPrimeSpec", "generate_strong_prime",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
