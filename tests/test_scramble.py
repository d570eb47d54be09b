import numpy as np
import pytest

from cube_astar import (
    MOVES,
    apply_moves,
    has_valid_counts,
    invert_moves,
    is_goal,
    scramble,
    solved_state,
)


def test_zero_moves_is_solved():
    state, moves = scramble(0)
    assert moves == []
    assert is_goal(state, solved_state())


def test_moves_reproduce_state():
    state, moves = scramble(10, rng=2024)
    assert len(moves) == 10
    assert all(m in MOVES for m in moves)
    assert np.array_equal(apply_moves(solved_state(), moves), state)
    assert has_valid_counts(state)


def test_seeded_scrambles_are_deterministic():
    a = scramble(15, rng=99)
    b = scramble(15, rng=np.random.default_rng(99))
    assert a.moves == b.moves
    assert np.array_equal(a.state, b.state)


def test_inverse_sequence_solves_scramble():
    state, moves = scramble(20, rng=4)
    assert is_goal(apply_moves(state, invert_moves(moves)), solved_state())


def test_negative_count():
    with pytest.raises(ValueError):
        scramble(-1)
