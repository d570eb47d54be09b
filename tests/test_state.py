import numpy as np
import pytest

from cube_astar import (
    Face,
    apply_move,
    as_state,
    canonical_key,
    describe_state,
    has_valid_counts,
    is_goal,
    scramble,
    solved_state,
    to_kociemba_string,
)
from cube_astar.state import GOAL_DESCRIPTION


def test_solved_state_layout():
    state = solved_state()
    assert state.shape == (6, 9)
    for face in Face:
        assert (state[face] == int(face)).all()
    assert has_valid_counts(state)


def test_is_goal():
    assert is_goal(solved_state(), solved_state())
    assert not is_goal(apply_move(solved_state(), "L"), solved_state())


def test_canonical_key():
    assert canonical_key(solved_state()) == "000000000|111111111|222222222|333333333|444444444|555555555"

    copy = as_state(solved_state().tolist())
    assert canonical_key(copy) == canonical_key(solved_state())
    assert canonical_key(apply_move(solved_state(), "D")) != canonical_key(solved_state())


def test_as_state_accepts_flat_input():
    flat = list(range(6)) * 9
    assert as_state(flat).shape == (6, 9)


def test_as_state_validates():
    with pytest.raises(ValueError):
        as_state([[0] * 9] * 5)
    with pytest.raises(ValueError):
        as_state([[6] * 9] * 6)
    with pytest.raises(ValueError):
        as_state([[-1] * 9] * 6)


def test_has_valid_counts():
    assert has_valid_counts(scramble(30, rng=3).state)
    assert not has_valid_counts(np.zeros((6, 9), dtype=np.int8))


def test_describe_state():
    lines = describe_state(solved_state()).splitlines()
    assert len(lines) == 6
    assert lines[0] == "Up(White): WWW WWW WWW"
    assert lines[5] == "Down(Yellow): YYY YYY YYY"
    assert GOAL_DESCRIPTION == describe_state(solved_state())


def test_kociemba_string_of_solved_state():
    assert to_kociemba_string(solved_state()) == "UUUUUUUUURRRRRRRRRFFFFFFFFFDDDDDDDDDLLLLLLLLLBBBBBBBBB"


def test_as_state_rejects_non_integer_values():
    with pytest.raises(ValueError):
        as_state([[0.7] * 9] * 6)
    with pytest.raises(ValueError):
        as_state(np.zeros((6, 9), dtype=np.float32))
