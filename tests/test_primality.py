import pytest
from sympy import isprime, jacobi_symbol

from primeforge import InvalidParameters, PrimalityVerdict, RandomSource, check_probable_prime
from primeforge.primality import (
    _miller_rabin_base,
    baillie_psw,
    is_square,
    jacobi,
    miller_rabin,
    rounds_for_bits,
    strong_lucas,
)

CARMICHAEL = [561, 1105, 1729, 2465, 2821, 6601, 8911, 10585, 15841, 29341,
              41041, 46657, 52633, 62745, 63973, 75361, 101101, 115921, 126217]

# strong pseudoprimes to base 2
SPSP2 = [2047, 3277, 4033, 4681, 8321, 15841, 29341, 42799, 49141, 52633]

# strong Lucas pseudoprimes (Selfridge parameters)
SLPSP = [5459, 5777, 10877, 16109, 18971, 22499, 24569, 25199, 40309, 58519]

# strong pseudoprime to every prime base up to 23
SPSP_TO_23 = 3825123056546413051


class TestHelpers:

    def test_jacobi_matches_sympy(self):
        for n in range(1, 200, 2):
            for a in range(-30, 60):
                assert jacobi(a, n) == jacobi_symbol(a, n), (a, n)

    def test_jacobi_rejects_even_modulus(self):
        with pytest.raises(ValueError):
            jacobi(3, 10)

    @pytest.mark.parametrize("n,expected", [
        (0, True), (1, True), (4, True), (10 ** 40, True),
        (2, False), (99, False), (10 ** 40 + 1, False), (-4, False),
    ])
    def test_is_square(self, n, expected):
        assert is_square(n) is expected

    def test_rounds_shrink_with_size(self):
        assert rounds_for_bits(8) == 50
        assert rounds_for_bits(100) == 28
        assert rounds_for_bits(512) == 5
        assert rounds_for_bits(2048) == 4
        sizes = [2, 64, 99, 100, 256, 511, 512, 1024, 1536, 4096, 16384]
        rounds = [rounds_for_bits(b) for b in sizes]
        assert rounds == sorted(rounds, reverse=True)


class TestMillerRabin:

    @pytest.mark.parametrize("n", SPSP2)
    def test_base_two_is_fooled(self, n):
        assert _miller_rabin_base(n, 2)

    def test_fooled_by_first_nine_prime_bases(self):
        for a in (2, 3, 5, 7, 11, 13, 17, 19, 23):
            assert _miller_rabin_base(SPSP_TO_23, a)

    def test_many_random_rounds_catch_pseudoprime(self, seeded):
        assert not miller_rabin(SPSP_TO_23, 40, seeded())

    @pytest.mark.parametrize("n", [5, 7, 101, 7919, (1 << 61) - 1, (1 << 89) - 1])
    def test_primes_pass(self, seeded, n):
        assert miller_rabin(n, 20, seeded())


class TestLucas:

    def test_agrees_with_sympy_below_first_pseudoprime(self):
        for n in range(3, 5459, 2):
            assert strong_lucas(n) is isprime(n), n

    @pytest.mark.parametrize("n", SLPSP)
    def test_known_pseudoprimes_pass_lucas_alone(self, n):
        assert strong_lucas(n)
        assert not _miller_rabin_base(n, 2)

    @pytest.mark.parametrize("n", [(1 << 127) - 1, (1 << 521) - 1, 2 ** 255 - 19])
    def test_large_primes(self, n):
        assert strong_lucas(n)

    def test_catches_miller_rabin_pseudoprime(self):
        assert not strong_lucas(SPSP_TO_23)

    def test_squares_and_evens(self):
        assert not strong_lucas(49)
        assert not strong_lucas(1018081)   # 1009^2
        assert strong_lucas(2)
        assert not strong_lucas(4)
        assert not strong_lucas(1)


class TestCheckProbablePrime:

    def test_small_values_match_sympy(self):
        for n in range(-5, 5000):
            verdict = check_probable_prime(n)
            assert bool(verdict) is isprime(n), n

    def test_values_past_the_sieve_square_match_sympy(self):
        for n in range(4_000_000, 4_001_000):
            assert bool(check_probable_prime(n)) is isprime(n), n

    @pytest.mark.parametrize("n", CARMICHAEL + SPSP2 + SLPSP + [SPSP_TO_23])
    def test_pseudoprimes_are_composite(self, n):
        assert check_probable_prime(n) is PrimalityVerdict.COMPOSITE
        assert check_probable_prime(n, rounds=1) is PrimalityVerdict.COMPOSITE

    @pytest.mark.parametrize("n", [
        (1 << 67) - 1,            # 193707721 * 761838257287
        (1 << 128) + 1,           # F7
        ((1 << 89) - 1) * ((1 << 107) - 1),
    ])
    def test_large_composites(self, n):
        assert check_probable_prime(n) is PrimalityVerdict.COMPOSITE

    @pytest.mark.parametrize("n", [
        (1 << 127) - 1, (1 << 521) - 1, (1 << 607) - 1, 2 ** 255 - 19,
        2 ** 64 - 59, 2 ** 128 - 159,
    ])
    def test_large_primes(self, n):
        assert check_probable_prime(n) is PrimalityVerdict.PROBABLY_PRIME

    def test_small_table_primes_skip_probabilistic_stages(self):
        def no_entropy(n):
            raise AssertionError("entropy used for a small prime")
        rng = RandomSource(no_entropy)
        for p in (2, 3, 5, 1999):
            assert check_probable_prime(p, rng=rng) is PrimalityVerdict.PROBABLY_PRIME

    def test_same_input_same_verdict(self, seeded):
        for n in [(1 << 127) - 1, SPSP_TO_23, (1 << 128) + 1]:
            verdicts = {check_probable_prime(n, rounds=3, rng=seeded(i)) for i in range(10)}
            assert len(verdicts) == 1

    def test_verdict_truthiness(self):
        assert PrimalityVerdict.PROBABLY_PRIME
        assert not PrimalityVerdict.COMPOSITE

    @pytest.mark.parametrize("candidate", [7.0, "7", None, True])
    def test_non_integer_candidates(self, candidate):
        with pytest.raises(InvalidParameters):
            check_probable_prime(candidate)

    @pytest.mark.parametrize("rounds", [0, -1, 1.5, "5", True])
    def test_bad_round_counts(self, rounds):
        with pytest.raises(InvalidParameters):
            check_probable_prime(101, rounds=rounds)


class TestBailliePSW:

    def test_agrees_with_sympy(self):
        for n in range(0, 20000):
            assert baillie_psw(n) is isprime(n), n

    @pytest.mark.parametrize("n", CARMICHAEL + SPSP2 + SLPSP + [SPSP_TO_23])
    def test_pseudoprimes(self, n):
        assert not baillie_psw(n)
