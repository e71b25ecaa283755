"""Tests for random sources."""

import pytest

from src.core.rng import (
    DefaultRng,
    NumpyRng,
    Rng,
    RngExhaustedError,
    SeededRng,
    SequenceRng,
    make_rng,
    rand_int,
)


class TestSeededRng:
    """Tests for the mulberry32 generator."""

    def test_same_seed_same_stream(self):
        a, b = SeededRng(1234), SeededRng(1234)
        assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    def test_different_seeds_differ(self):
        a, b = SeededRng(1), SeededRng(2)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_values_in_unit_interval(self):
        rng = SeededRng(99)
        for _ in range(1000):
            value = rng.next()
            assert 0.0 <= value < 1.0

    def test_large_seed_wraps(self):
        a, b = SeededRng(5), SeededRng(5 + 2**32)
        assert a.next() == b.next()


class TestSequenceRng:
    """Tests for the replay source."""

    def test_replays_values(self):
        rng = SequenceRng([0.1, 0.2])
        assert rng.next() == 0.1
        assert rng.next() == 0.2
        assert rng.consumed == 2

    def test_exhausted(self):
        rng = SequenceRng([0.5])
        rng.next()
        with pytest.raises(RngExhaustedError):
            rng.next()

    def test_cycle(self):
        rng = SequenceRng([0.1, 0.2], cycle=True)
        assert [rng.next() for _ in range(5)] == [0.1, 0.2, 0.1, 0.2, 0.1]
        assert rng.consumed == 5

    def test_empty_cycle_raises(self):
        with pytest.raises(RngExhaustedError):
            SequenceRng([], cycle=True).next()


class TestHelpers:
    """Tests for rand_int and make_rng."""

    def test_rand_int_bounds(self):
        assert rand_int(SequenceRng([0.0]), 1, 6) == 1
        assert rand_int(SequenceRng([0.999]), 1, 6) == 6
        assert rand_int(SequenceRng([0.5]), 3, 3) == 3

    def test_rand_int_invalid_range(self):
        with pytest.raises(ValueError):
            rand_int(SequenceRng([0.5]), 5, 4)

    def test_make_rng(self):
        assert isinstance(make_rng(), DefaultRng)
        assert isinstance(make_rng(7), SeededRng)
        assert make_rng(7).next() == SeededRng(7).next()

    def test_numpy_rng_reproducible(self):
        a, b = NumpyRng(3), NumpyRng(3)
        assert [a.next() for _ in range(5)] == [b.next() for _ in range(5)]

    @pytest.mark.parametrize("rng", [DefaultRng(1), SeededRng(1), SequenceRng([0.5]), NumpyRng(1)])
    def test_protocol(self, rng):
        assert isinstance(rng, Rng)
