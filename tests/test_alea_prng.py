"""Tests for the Alea PRNG and per-stage streams."""

import pytest

from mapgen.core.alea_prng import AleaPRNG
from mapgen.core.errors import ConfigurationError
from mapgen.utils.random import MAX_SEED, stage_prng


class TestAleaPRNG:
    """Test the Alea generator."""

    def test_same_seed_same_stream(self):
        a = AleaPRNG("seed")
        b = AleaPRNG("seed")
        assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

    def test_different_seeds_differ(self):
        a = AleaPRNG("one")
        b = AleaPRNG("two")
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_numeric_and_string_seed_match(self):
        """Seeds are mashed as strings, so 42 and "42" are the same seed."""
        assert AleaPRNG(42).random() == AleaPRNG("42").random()

    def test_random_range(self):
        prng = AleaPRNG("range")
        values = [prng.random() for _ in range(1000)]
        assert all(0 <= v < 1 for v in values)

    def test_randint_inclusive(self):
        prng = AleaPRNG("ints")
        values = {prng.randint(3, 5) for _ in range(500)}
        assert values == {3, 4, 5}

    def test_uniform_bounds(self):
        prng = AleaPRNG("uniform")
        assert all(-2 <= prng.uniform(-2, 3) < 3 for _ in range(200))

    def test_probability_edges(self):
        prng = AleaPRNG("p")
        assert prng.probability(1.0)
        assert not prng.probability(0.0)
        # Certain outcomes do not consume the stream
        assert prng.call_count == 0

    def test_choice(self):
        prng = AleaPRNG("choice")
        items = ["a", "b", "c"]
        assert all(prng.choice(items) in items for _ in range(50))
        with pytest.raises(IndexError):
            prng.choice([])

    def test_call_count(self):
        prng = AleaPRNG("count")
        for _ in range(7):
            prng.random()
        assert prng.call_count == 7


class TestStagePRNG:
    """Test per-stage stream derivation."""

    def test_stage_streams_are_independent(self):
        heightmap = stage_prng(42, "heightmap")
        provinces = stage_prng(42, "provinces")
        assert heightmap.random() != provinces.random()

    def test_stage_streams_are_reproducible(self):
        assert stage_prng(7, "climate").random() == stage_prng(7, "climate").random()

    def test_seed_bounds(self):
        stage_prng(0, "x")
        stage_prng(MAX_SEED, "x")
        with pytest.raises(ConfigurationError):
            stage_prng(-1, "x")
        with pytest.raises(ConfigurationError):
            stage_prng(MAX_SEED + 1, "x")
