"""Tests for the seeded PRNG and seed helpers."""

import pytest

from py_worldgen.core.prng import SeededPRNG
from py_worldgen.utils.random import create_prng, resolve_seed


class TestSeededPRNG:
    """Test the Mulberry32 generator."""

    def test_same_seed_same_sequence(self):
        a = SeededPRNG(42)
        b = SeededPRNG(42)
        assert [a.random() for _ in range(100)] == [b.random() for _ in range(100)]

    def test_different_seeds_differ(self):
        a = SeededPRNG(1)
        b = SeededPRNG(2)
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_values_in_unit_interval(self):
        prng = SeededPRNG(123)
        values = [prng.random() for _ in range(5000)]
        assert all(0.0 <= v < 1.0 for v in values)
        # Roughly uniform
        mean = sum(values) / len(values)
        assert 0.45 < mean < 0.55

    def test_seed_reduced_to_32_bits(self):
        assert SeededPRNG(2**32 + 5).seed == 5
        assert SeededPRNG(-1).seed == 0xFFFFFFFF

    def test_call_count(self):
        prng = SeededPRNG(7)
        for _ in range(3):
            prng.random()
        prng.randint(10)
        assert prng.call_count == 4

    def test_randint_range(self):
        prng = SeededPRNG(9)
        values = {prng.randint(4) for _ in range(500)}
        assert values == {0, 1, 2, 3}

    def test_randint_rejects_non_positive(self):
        with pytest.raises(ValueError):
            SeededPRNG(1).randint(0)

    def test_chance_extremes(self):
        prng = SeededPRNG(3)
        assert prng.chance(1.0) is True
        assert prng.chance(0.0) is False
        # Extremes do not consume draws
        assert prng.call_count == 0

    def test_choice(self):
        prng = SeededPRNG(11)
        seq = ["a", "b", "c"]
        assert prng.choice(seq) in seq
        with pytest.raises(IndexError):
            prng.choice([])

    def test_derive_seed_is_32_bit(self):
        prng = SeededPRNG(5)
        for _ in range(100):
            assert 0 <= prng.derive_seed() <= 0xFFFFFFFF


class TestSeedHelpers:
    """Test seed resolution."""

    def test_explicit_seed_kept(self):
        assert resolve_seed(42) == 42

    def test_none_gives_random_seed(self):
        seeds = {resolve_seed(None) for _ in range(20)}
        assert all(0 <= s <= 0xFFFFFFFF for s in seeds)
        assert len(seeds) > 1

    def test_create_prng(self):
        assert create_prng(42).random() == SeededPRNG(42).random()
