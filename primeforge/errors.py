# primeforge/errors.py
# Exception taxonomy. Parameter mistakes are ValueErrors (fix the call),
# resource problems are RuntimeErrors (retry the call).

from __future__ import annotations

from .config import MAX_BIT_LENGTH, MIN_BIT_LENGTH


class PrimeForgeError(Exception):
    """Base class for every error raised by primeforge."""


class InvalidBitLength(PrimeForgeError, ValueError):
    def __init__(self, bit_length: int, minimum: int = MIN_BIT_LENGTH,
                 maximum: int = MAX_BIT_LENGTH):
        self.bit_length = bit_length
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"bit length {bit_length} outside supported range {minimum}..{maximum}"
        )


class InvalidParameters(PrimeForgeError, ValueError):
    pass


class RandomSourceFailure(PrimeForgeError, RuntimeError):
    pass


class GenerationExhausted(PrimeForgeError, RuntimeError):
    def __init__(self, bit_length: int, attempts: int, what: str = "prime"):
        self.bit_length = bit_length
        self.attempts = attempts
        super().__init__(
            f"no {bit_length}-bit {what} found after {attempts} candidates"
        )
