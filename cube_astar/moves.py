"""Face turns as permutations of the 54 facelets.

Only the U, D, R and L faces are turnable. Every move is a precomputed index
table ``perm`` such that ``new.ravel() == old.ravel()[perm]``.
"""
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .state import NUM_FACES, NUM_STICKERS, STICKERS_PER_FACE, Face, as_state

# Clockwise rotation of a face's own stickers: corners 0->2->8->6, edges 1->5->7->3
FACE_CW = [6, 3, 0, 7, 4, 1, 8, 5, 2]

# Edge strips moved by a clockwise turn. Each strip takes the values of the
# strip after it; the last takes the values of the first.
Strip = Tuple[Face, Tuple[int, int, int]]
SIDE_CYCLES: Dict[str, List[Strip]] = {
    "U": [
        (Face.LEFT, (0, 1, 2)),
        (Face.FRONT, (0, 1, 2)),
        (Face.RIGHT, (0, 1, 2)),
        (Face.BACK, (0, 1, 2)),
    ],
    "D": [
        (Face.LEFT, (6, 7, 8)),
        (Face.BACK, (6, 7, 8)),
        (Face.RIGHT, (6, 7, 8)),
        (Face.FRONT, (6, 7, 8)),
    ],
    "R": [
        (Face.UP, (2, 5, 8)),
        (Face.FRONT, (2, 5, 8)),
        (Face.DOWN, (2, 5, 8)),
        (Face.BACK, (6, 3, 0)),
    ],
    "L": [
        (Face.UP, (0, 3, 6)),
        (Face.BACK, (8, 5, 2)),
        (Face.DOWN, (0, 3, 6)),
        (Face.FRONT, (0, 3, 6)),
    ],
}
TURNED_FACE = {"U": Face.UP, "D": Face.DOWN, "R": Face.RIGHT, "L": Face.LEFT}


def _index(face: int, sticker: int) -> int:
    return face * STICKERS_PER_FACE + sticker


def _clockwise_table(face_name: str) -> np.ndarray:
    perm = np.arange(NUM_STICKERS)

    face = TURNED_FACE[face_name]
    for i, src in enumerate(FACE_CW):
        perm[_index(face, i)] = _index(face, src)

    strips = SIDE_CYCLES[face_name]
    for k, (dst_face, dst_idx) in enumerate(strips):
        src_face, src_idx = strips[(k + 1) % len(strips)]
        for d, s in zip(dst_idx, src_idx):
            perm[_index(dst_face, d)] = _index(src_face, s)
    return perm


def _build_tables() -> Dict[str, np.ndarray]:
    tables = {}
    for face_name in ("U", "D", "R", "L"):
        cw = _clockwise_table(face_name)
        tables[face_name] = cw
        tables[face_name + "'"] = np.argsort(cw)
        tables[face_name + "2"] = cw[cw]
    for table in tables.values():
        table.flags.writeable = False
    return tables


_TABLES = _build_tables()


class Move(Enum):
    U = "U"
    U_PRIME = "U'"
    U2 = "U2"
    D = "D"
    D_PRIME = "D'"
    D2 = "D2"
    R = "R"
    R_PRIME = "R'"
    R2 = "R2"
    L = "L"
    L_PRIME = "L'"
    L2 = "L2"

    def __str__(self):
        return self.value

    @property
    def face(self) -> str:
        return self.value[0]

    @property
    def permutation(self) -> np.ndarray:
        return _TABLES[self.value]

    @property
    def inverse(self) -> "Move":
        if self.value.endswith("2"):
            return self
        if self.value.endswith("'"):
            return Move(self.face)
        return Move(self.face + "'")

    @classmethod
    def parse(cls, token: str) -> Optional["Move"]:
        """Look up a move by its token; None if the token is not in the vocabulary."""
        try:
            return cls(token)
        except ValueError:
            return None


MOVES: Tuple[Move, ...] = tuple(Move)
MOVE_TOKENS: Tuple[str, ...] = tuple(m.value for m in MOVES)

MoveLike = Union[Move, str]


def _as_move(move: MoveLike) -> Move:
    if isinstance(move, Move):
        return move
    parsed = Move.parse(move)
    if parsed is None:
        raise ValueError(f"Unknown move token: {move!r}")
    return parsed


def apply_move(state: np.ndarray, move: MoveLike) -> np.ndarray:
    """Return a new, read-only state with ``move`` applied. The input is left untouched."""
    perm = _as_move(move).permutation
    new_state = np.asarray(state).reshape(NUM_STICKERS)[perm].reshape(NUM_FACES, STICKERS_PER_FACE)
    new_state.flags.writeable = False
    return new_state


def apply_moves(state: np.ndarray, moves: Iterable[MoveLike]) -> np.ndarray:
    """Apply ``moves`` in order. Always returns a new read-only state, even for no moves."""
    state = as_state(state)
    for move in moves:
        state = apply_move(state, move)
    return state


def parse_moves(text: str) -> List[Move]:
    """Split a whitespace-delimited move string, silently dropping unknown tokens."""
    moves = []
    for token in text.split():
        move = Move.parse(token)
        if move is not None:
            moves.append(move)
    return moves


def format_moves(moves: Iterable[MoveLike]) -> str:
    return " ".join(str(m) for m in moves)


def invert_moves(moves: Sequence[MoveLike]) -> List[Move]:
    """The sequence that undoes ``moves``."""
    return [_as_move(m).inverse for m in reversed(moves)]


_QUARTER_TURNS = {"": 1, "2": 2, "'": 3}
_SUFFIX = {1: "", 2: "2", 3: "'"}


def simplify_moves(moves: Iterable[MoveLike]) -> List[Move]:
    """Merge runs of turns on the same face, e.g. ``U U`` -> ``U2`` and ``R R'`` -> nothing."""
    out: List[Move] = []
    for move in map(_as_move, moves):
        if out and out[-1].face == move.face:
            turns = (_QUARTER_TURNS[out.pop().value[1:]] + _QUARTER_TURNS[move.value[1:]]) % 4
            if turns:
                out.append(Move(move.face + _SUFFIX[turns]))
        else:
            out.append(move)
    return out
