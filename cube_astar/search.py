"""A* search over cube states.

The search is a resumable state machine: ``AStarSearch.step()`` expands at
most one node and reports whether the search is still running, has reached
the goal, or has run out of frontier. Callers drive it from a plain loop
(``run``/``solve_cube``), an asyncio task (``solve_cube_async``) or any other
scheduler, and abandon it simply by not calling ``step()`` again.
"""
import asyncio
import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np
from tqdm import tqdm

from .config import SearchConfig
from .heuristic import HeuristicProvider
from .moves import MOVES, Move, apply_move
from .oracle import HeuristicOracle
from .state import as_state, canonical_key, is_goal, solved_state

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, eq=False)
class SearchNode:
    state: np.ndarray = field(repr=False)
    g: int
    h: int
    moves: Tuple[Move, ...] = ()

    @property
    def f(self) -> int:
        return self.g + self.h


@dataclass(frozen=True)
class SolveResult:
    moves: List[str]
    states_explored: int
    time_ms: float
    solved: bool
    oracle_calls: int = 0
    abandoned: bool = False

    def to_dict(self) -> Dict:
        return {
            "moves": list(self.moves),
            "statesExplored": self.states_explored,
            "timeMs": self.time_ms,
        }


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus
    states_explored: int
    frontier_size: int
    result: Optional[SolveResult] = None

    @property
    def done(self) -> bool:
        return self.status is not StepStatus.IN_PROGRESS


class AStarSearch:
    """One A* invocation. Frontier, visited set and heuristic cache are private to it."""

    def __init__(
        self,
        start: np.ndarray,
        goal: Optional[np.ndarray] = None,
        heuristic: Optional[HeuristicProvider] = None,
        moves: Sequence[Move] = MOVES,
    ):
        self.start_time = time.perf_counter()
        self.goal = solved_state() if goal is None else as_state(goal)
        self.heuristic = heuristic if heuristic is not None else HeuristicProvider()
        self.heuristic.reset()
        self.moves = tuple(moves)

        # entries are (f, insertion order, node): equal f pops first-in first-out
        self.frontier: List[Tuple[int, int, SearchNode]] = []
        self.visited: Set[str] = set()
        self.nodes_generated = 0
        self._sequence = itertools.count()
        self._outcome: Optional[StepOutcome] = None

        start = as_state(start)
        self._push(SearchNode(start, 0, self.heuristic.smart_estimate(start, self.goal)))

    @property
    def states_explored(self) -> int:
        return len(self.visited)

    def _push(self, node: SearchNode):
        heapq.heappush(self.frontier, (node.f, next(self._sequence), node))
        self.nodes_generated += 1

    def _result(self, moves: Sequence[Move], solved: bool, abandoned: bool = False) -> SolveResult:
        return SolveResult(
            moves=[m.value for m in moves],
            states_explored=self.states_explored,
            time_ms=(time.perf_counter() - self.start_time) * 1000.0,
            solved=solved,
            oracle_calls=self.heuristic.oracle_calls,
            abandoned=abandoned,
        )

    def _finish(self, status: StepStatus, result: SolveResult) -> StepOutcome:
        self._outcome = StepOutcome(status, self.states_explored, len(self.frontier), result)
        logger.debug(
            "search %s: %d moves, %d states explored, %.1f ms",
            status.value, len(result.moves), result.states_explored, result.time_ms,
        )
        return self._outcome

    def step(self) -> StepOutcome:
        """Pop the best frontier node and expand it."""
        if self._outcome is not None:
            return self._outcome

        if not self.frontier:
            return self._finish(StepStatus.EXHAUSTED, self._result([], solved=False))

        _, _, current = heapq.heappop(self.frontier)
        key = canonical_key(current.state)
        if key in self.visited:
            # stale duplicate, pruned lazily
            return StepOutcome(StepStatus.IN_PROGRESS, self.states_explored, len(self.frontier))
        self.visited.add(key)

        if is_goal(current.state, self.goal):
            return self._finish(StepStatus.SUCCESS, self._result(current.moves, solved=True))

        for move in self.moves:
            neighbor = apply_move(current.state, move)
            if canonical_key(neighbor) in self.visited:
                continue
            h = self.heuristic.smart_estimate(neighbor, self.goal)
            self._push(SearchNode(neighbor, current.g + 1, h, current.moves + (move,)))

        return StepOutcome(StepStatus.IN_PROGRESS, self.states_explored, len(self.frontier))

    def run(self, progress: bool = False, max_expansions: Optional[int] = None) -> SolveResult:
        """Step until the search terminates.

        ``max_expansions`` lets the caller give up early; the returned result
        is then unsolved and marked ``abandoned``.
        """
        pbar = tqdm(desc="A* Search", unit=" states", disable=not progress)
        reported = 0
        try:
            while True:
                outcome = self.step()
                pbar.update(outcome.states_explored - reported)
                reported = outcome.states_explored
                if outcome.done:
                    return outcome.result
                if max_expansions is not None and outcome.states_explored >= max_expansions:
                    return self._result([], solved=False, abandoned=True)
        finally:
            pbar.close()


def make_provider(oracle: Optional[HeuristicOracle] = None, config: Optional[SearchConfig] = None) -> HeuristicProvider:
    config = config or SearchConfig()
    return HeuristicProvider(
        oracle=oracle,
        interval=config.oracle_interval,
        impact=config.impact,
        bounds=(config.oracle_min, config.oracle_max),
    )


def solve_cube(
    start: np.ndarray,
    goal: Optional[np.ndarray] = None,
    oracle: Optional[HeuristicOracle] = None,
    config: Optional[SearchConfig] = None,
    progress: bool = False,
    max_expansions: Optional[int] = None,
) -> SolveResult:
    search = AStarSearch(start, goal, make_provider(oracle, config))
    return search.run(progress=progress, max_expansions=max_expansions)


async def solve_cube_async(
    start: np.ndarray,
    goal: Optional[np.ndarray] = None,
    oracle: Optional[HeuristicOracle] = None,
    config: Optional[SearchConfig] = None,
) -> SolveResult:
    """Run the search one step at a time in a worker thread, yielding to the loop between steps.

    Steps run strictly one after another, so oracle requests for a search
    never overlap. Cancelling the awaiting task stops the search after the
    step in flight.
    """
    search = await asyncio.to_thread(AStarSearch, start, goal, make_provider(oracle, config))
    while True:
        outcome = await asyncio.to_thread(search.step)
        if outcome.done:
            return outcome.result
