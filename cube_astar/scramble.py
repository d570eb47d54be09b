from typing import List, NamedTuple, Optional, Union

import numpy as np

from .moves import MOVES, Move, apply_move
from .state import solved_state


class Scramble(NamedTuple):
    state: np.ndarray
    moves: List[Move]


def scramble(count: int, rng: Optional[Union[np.random.Generator, int]] = None) -> Scramble:
    """Apply ``count`` uniformly random moves to the solved state.

    Returns the resulting state together with the exact moves applied.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    state = solved_state()
    applied = []
    for _ in range(count):
        move = MOVES[int(rng.integers(0, len(MOVES)))]
        state = apply_move(state, move)
        applied.append(move)

    return Scramble(state, applied)
