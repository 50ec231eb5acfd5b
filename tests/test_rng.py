"""Tests for the explicit random number streams."""

import numpy as np
import pytest

from labyrinth.rng import RngState, as_rng_state


class TestRngState:
    """Draws are pure functions of the state."""

    def test_same_seed_same_state(self):
        assert RngState.from_seed(7) == RngState.from_seed(7)
        assert RngState.from_seed(7) != RngState.from_seed(8)

    def test_draw_returns_a_new_state(self):
        """Drawing does not mutate the state it was drawn from."""
        rng = RngState.from_seed(1)
        before = RngState(rng.state, rng.inc, rng.has_uint32, rng.uinteger)

        _, next_rng = rng.randint(0, 100)

        assert rng == before
        assert next_rng != rng

    def test_small_draws_follow_one_continuous_generator(self):
        """Ranges below 2**32 use half-words, and the spare half carries over."""
        generator = np.random.Generator(np.random.PCG64(5))
        expected = [int(generator.integers(0, 9, endpoint=True)) for _ in range(25)]

        drawn = []
        state = RngState.from_seed(5)
        for _ in range(25):
            value, state = state.randint(0, 9)
            drawn.append(value)

        assert drawn == expected
        assert state.has_uint32 == generator.bit_generator.state["has_uint32"]
        assert state.uinteger == generator.bit_generator.state["uinteger"]

    def test_same_state_replays_the_same_draws(self):
        rng = RngState.from_seed(99)
        first = []
        state = rng
        for _ in range(20):
            value, state = state.randint(0, 1000)
            first.append(value)

        second = []
        state = rng
        for _ in range(20):
            value, state = state.randint(0, 1000)
            second.append(value)

        assert first == second

    def test_randint_is_inclusive(self):
        """Both ends of the range can be drawn and nothing outside it."""
        seen = set()
        state = RngState.from_seed(3)
        for _ in range(200):
            value, state = state.randint(2, 4)
            seen.add(value)
        assert seen == {2, 3, 4}

    def test_randint_single_value_range(self):
        value, _ = RngState.from_seed(0).randint(5, 5)
        assert value == 5

    def test_randint_empty_range_raises(self):
        with pytest.raises(ValueError):
            RngState.from_seed(0).randint(5, 4)

    def test_random_in_unit_interval(self):
        state = RngState.from_seed(11)
        for _ in range(50):
            value, state = state.random()
            assert 0.0 <= value < 1.0

    def test_choice(self):
        items = ["a", "b", "c"]
        state = RngState.from_seed(5)
        for _ in range(30):
            item, state = state.choice(items)
            assert item in items

    def test_choice_from_empty_sequence_raises(self):
        with pytest.raises(ValueError):
            RngState.from_seed(0).choice([])

    def test_weighted_choice_never_picks_zero_weight(self):
        state = RngState.from_seed(21)
        for _ in range(100):
            item, state = state.weighted_choice(["never", "always"], [0.0, 2.0])
            assert item == "always"

    @pytest.mark.parametrize(
        "items,weights",
        [
            (["a", "b"], [1.0]),
            (["a", "b"], [1.0, -1.0]),
            (["a", "b"], [0.0, 0.0]),
            ([], []),
        ],
    )
    def test_weighted_choice_rejects_bad_weights(self, items, weights):
        with pytest.raises(ValueError):
            RngState.from_seed(0).weighted_choice(items, weights)

    def test_shuffled_is_a_permutation(self):
        items = list(range(10))
        shuffled, _ = RngState.from_seed(4).shuffled(items)
        assert sorted(shuffled) == items
        assert items == list(range(10))

    def test_split_gives_an_independent_stream(self):
        """The child stream differs from the parent's continuation."""
        child, parent = RngState.from_seed(8).split()
        assert child != parent

        child_values = []
        parent_values = []
        for _ in range(5):
            value, child = child.randint(0, 10**9)
            child_values.append(value)
            value, parent = parent.randint(0, 10**9)
            parent_values.append(value)
        assert child_values != parent_values


class TestAsRngState:
    """Seed coercion."""

    def test_int_seed(self):
        assert as_rng_state(42) == RngState.from_seed(42)

    def test_numpy_int_seed(self):
        assert as_rng_state(np.int64(42)) == RngState.from_seed(42)

    def test_state_passes_through(self):
        state = RngState.from_seed(42)
        assert as_rng_state(state) is state

    @pytest.mark.parametrize("seed", ["42", 4.2, None, True])
    def test_rejects_other_types(self, seed):
        with pytest.raises(TypeError):
            as_rng_state(seed)
