"""Tests for the Alea random source."""

import pytest
from py_topo.core.alea_prng import AleaPRNG


class TestAleaPRNG:
    """Test seeded random number generation."""

    def test_same_seed_same_sequence(self):
        """Test that two generators with the same seed agree."""
        a = AleaPRNG(123.456)
        b = AleaPRNG(123.456)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seeds_differ(self):
        """Test that different seeds give different sequences."""
        a = AleaPRNG(1.0)
        b = AleaPRNG(2.0)
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    @pytest.mark.parametrize("seed", [0, 0.0, -5.25, "terrain", 999.999])
    def test_values_in_unit_interval(self, seed):
        """Test that output stays in [0, 1) for assorted seeds."""
        prng = AleaPRNG(seed)
        values = [prng.random() for _ in range(500)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert len(set(values)) > 490

    def test_call_count(self):
        """Test that calls are counted."""
        prng = AleaPRNG("count")
        for _ in range(7):
            prng.random()
        assert prng.call_count == 7

    def test_randint_range(self):
        """Test randint bounds."""
        prng = AleaPRNG("ints")
        values = [prng.randint(6) for _ in range(300)]
        assert min(values) >= 0
        assert max(values) <= 5

    def test_randint_rejects_non_positive(self):
        """Test that randint needs a positive bound."""
        with pytest.raises(ValueError):
            AleaPRNG("x").randint(0)

    def test_shuffle_is_permutation(self):
        """Test that shuffle keeps every element."""
        prng = AleaPRNG(42)
        seq = list(range(256))
        prng.shuffle(seq)
        assert sorted(seq) == list(range(256))
        assert seq != list(range(256))

    def test_shuffle_reproducible(self):
        """Test that shuffling with the same seed gives the same order."""
        first = list(range(50))
        second = list(range(50))
        AleaPRNG("s").shuffle(first)
        AleaPRNG("s").shuffle(second)
        assert first == second

    def test_randint_rejects_bad_source(self, monkeypatch):
        """Test that values outside [0, 1) from the source are refused."""
        monkeypatch.setattr(AleaPRNG, "random", lambda self: 1.0)
        with pytest.raises(ValueError):
            AleaPRNG("x").randint(10)
