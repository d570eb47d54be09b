"""Facelet representation of a 3x3x3 cube.

A state is a ``(6, 9)`` int8 array. Faces are ordered Up, Left, Front,
Right, Back, Down; the nine stickers of a face are numbered row-major as
seen when looking straight at that face:

    0 1 2
    3 4 5
    6 7 8

The solved state has face ``i`` filled with value ``i``.
"""
from enum import IntEnum
from typing import Sequence

import numpy as np


class Face(IntEnum):
    UP = 0
    LEFT = 1
    FRONT = 2
    RIGHT = 3
    BACK = 4
    DOWN = 5


NUM_FACES = 6
STICKERS_PER_FACE = 9
NUM_STICKERS = NUM_FACES * STICKERS_PER_FACE

FACE_NAMES = ["Up(White)", "Left(Orange)", "Front(Green)", "Right(Red)", "Back(Blue)", "Down(Yellow)"]
COLOR_LETTERS = ["W", "O", "G", "R", "B", "Y"]

# kociemba expects faces in URFDLB order, lettered by the face whose center they match
KOCIEMBA_FACE_ORDER = [Face.UP, Face.RIGHT, Face.FRONT, Face.DOWN, Face.LEFT, Face.BACK]
KOCIEMBA_LETTERS = ["U", "L", "F", "R", "B", "D"]


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def solved_state() -> np.ndarray:
    """Return the goal state: each face filled with its own index."""
    state = np.repeat(np.arange(NUM_FACES, dtype=np.int8), STICKERS_PER_FACE).reshape(NUM_FACES, STICKERS_PER_FACE)
    return _freeze(state)


def as_state(faces: Sequence[Sequence[int]]) -> np.ndarray:
    """Coerce nested sequences (or an array) into a read-only state.

    Raises ValueError if the input is not 6x9, is not integer-valued, or holds
    values outside 0..5.
    """
    arr = np.asarray(faces)
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"Facelet values must be integers, got dtype {arr.dtype}")
    arr = arr.astype(np.int64)
    if arr.shape == (NUM_STICKERS,):
        arr = arr.reshape(NUM_FACES, STICKERS_PER_FACE)
    if arr.shape != (NUM_FACES, STICKERS_PER_FACE):
        raise ValueError(f"Expected a 6x9 facelet grid, got shape {arr.shape}")
    if arr.min() < 0 or arr.max() >= NUM_FACES:
        raise ValueError("Facelet values must lie in 0..5")
    return _freeze(arr.astype(np.int8))


def is_goal(state: np.ndarray, goal: np.ndarray) -> bool:
    """Positional comparison of all 54 facelets. Whole-cube rotations are not considered."""
    return bool(np.array_equal(state, goal))


def canonical_key(state: np.ndarray) -> str:
    # e.g. "000000000|111111111|..." -- identical facelets give identical keys
    digits = (np.asarray(state, dtype=np.uint8) + ord("0")).tobytes().decode("ascii")
    return "|".join(digits[i:i + STICKERS_PER_FACE] for i in range(0, NUM_STICKERS, STICKERS_PER_FACE))


def has_valid_counts(state: np.ndarray) -> bool:
    counts = np.bincount(np.asarray(state).ravel().astype(np.int64), minlength=NUM_FACES)
    return len(counts) == NUM_FACES and bool(np.all(counts == STICKERS_PER_FACE))


def describe_state(state: np.ndarray) -> str:
    """Render a state face by face, one row group per line, for text prompts."""
    lines = []
    for face_idx, face in enumerate(state):
        rows = [
            "".join(COLOR_LETTERS[int(v)] for v in face[row * 3:row * 3 + 3])
            for row in range(3)
        ]
        lines.append(f"{FACE_NAMES[face_idx]}: {' '.join(rows)}")
    return "\n".join(lines)


GOAL_DESCRIPTION = describe_state(solved_state())


def to_kociemba_string(state: np.ndarray) -> str:
    """54-character facelet string in kociemba's URFDLB layout."""
    return "".join(
        KOCIEMBA_LETTERS[int(v)]
        for face in KOCIEMBA_FACE_ORDER
        for v in state[face]
    )
