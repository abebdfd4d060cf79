"""Tests for the seeded linear congruential generator."""

import pytest

from py_castlerun.core.models import Position
from py_castlerun.core.seeded_random import (
    LCG_MODULUS,
    SeededRandom,
    create_rng,
    resolve_seed,
    shuffle_in_place,
)


class TestSeededRandom:
    """Test the raw LCG sequence."""

    def test_known_sequence(self):
        """State follows the recurrence exactly."""
        rng = SeededRandom(42)
        states = []
        for _ in range(3):
            rng.next()
            states.append(rng.state)

        assert states == [1250496027, 1116302264, 1000676753]

    def test_next_is_scaled_state(self):
        rng = SeededRandom(1)
        value = rng.next()

        assert rng.state == 1103527590
        assert value == 1103527590 / LCG_MODULUS
        assert 0 <= value < 1

    def test_same_seed_same_sequence(self):
        rng1 = SeededRandom(12345)
        rng2 = SeededRandom(12345)

        assert [rng1.next() for _ in range(100)] == [rng2.next() for _ in range(100)]

    def test_different_seeds(self):
        rng1 = SeededRandom(1)
        rng2 = SeededRandom(2)

        assert [rng1.next() for _ in range(10)] != [rng2.next() for _ in range(10)]

    def test_call_count(self):
        rng = SeededRandom(7)
        for _ in range(5):
            rng.next()
        rng.next_int(0, 10)

        assert rng.call_count == 6

    def test_next_int(self):
        """next_int floors the scaled value and offsets it by min."""
        rng = SeededRandom(42)

        assert rng.next_int(0, 10) == 5
        assert rng.next_int(0, 10) == 5
        assert rng.next_int(10, 20) == 14

    def test_next_int_range(self):
        rng = SeededRandom(99)
        values = [rng.next_int(3, 8) for _ in range(500)]

        assert min(values) >= 3
        assert max(values) < 8

    def test_choice(self):
        rng = SeededRandom(42)
        assert rng.choice([10, 20, 30, 40]) == 30

    def test_choice_empty(self):
        rng = SeededRandom(42)
        with pytest.raises(IndexError):
            rng.choice([])

    def test_random_position_draws_x_first(self):
        rng = SeededRandom(42)
        pos = rng.random_position(10, 20)

        assert pos == Position(5, 10)


class TestSeedHelpers:
    """Test seed resolution and shuffling."""

    def test_resolve_explicit_seed(self):
        assert resolve_seed(42) == 42

    def test_resolve_none_uses_clock(self):
        seed = resolve_seed(None)
        assert isinstance(seed, int)
        assert seed > 0

    def test_create_rng(self):
        rng = create_rng(42)
        assert rng.seed == 42
        assert rng.state == 42

    def test_shuffle_known_order(self):
        """Fisher-Yates from the end with j drawn from [0, i]."""
        items = ["a", "b", "c"]
        shuffle_in_place(items, SeededRandom(42))

        assert items == ["a", "c", "b"]

    def test_shuffle_is_permutation(self):
        items = list(range(50))
        shuffle_in_place(items, SeededRandom(3))

        assert sorted(items) == list(range(50))
        assert items != list(range(50))

    def test_shuffle_short_lists_consume_nothing(self):
        rng = SeededRandom(3)
        shuffle_in_place([], rng)
        shuffle_in_place([1], rng)

        assert rng.call_count == 0
