"""Remaining-move estimates used to order the A* frontier."""
import logging
import math
from typing import Dict, Optional, Tuple

import numpy as np

from .oracle import HeuristicOracle, OracleError
from .state import canonical_key

logger = logging.getLogger(__name__)

# A quarter turn touches at most 8 stickers on the turned face plus 12 on its
# neighbours; 8 is used as a plain scaling constant, not an admissible bound.
DEFAULT_IMPACT = 8
DEFAULT_INTERVAL = 15
DEFAULT_BOUNDS = (0, 50)


def local_estimate(state: np.ndarray, goal: np.ndarray, impact: int = DEFAULT_IMPACT) -> int:
    """Number of mismatched facelets divided by ``impact``, rounded up."""
    mismatched = int(np.count_nonzero(np.asarray(state) != np.asarray(goal)))
    return math.ceil(mismatched / impact)


class HeuristicProvider:
    """Local estimator with an optional oracle consulted every ``interval`` calls.

    The call counter and the oracle cache belong to one provider; a search
    resets them when it starts, so nothing leaks between searches.
    """

    def __init__(
        self,
        oracle: Optional[HeuristicOracle] = None,
        interval: int = DEFAULT_INTERVAL,
        impact: int = DEFAULT_IMPACT,
        bounds: Tuple[int, int] = DEFAULT_BOUNDS,
    ):
        if interval < 1:
            raise ValueError("interval must be >= 1")
        self.oracle = oracle
        self.interval = interval
        self.impact = impact
        self.bounds = bounds

        self.calls = 0
        self.oracle_calls = 0
        self.cache: Dict[str, int] = {}

    def reset(self):
        self.calls = 0
        self.oracle_calls = 0
        self.cache.clear()

    def local_estimate(self, state: np.ndarray, goal: np.ndarray) -> int:
        return local_estimate(state, goal, self.impact)

    def smart_estimate(self, state: np.ndarray, goal: np.ndarray) -> int:
        self.calls += 1
        if self.oracle is not None and self.calls % self.interval == 0:
            logger.debug("consulting oracle (call #%d)", self.calls)
            return self._oracle_estimate(state, goal)
        return self.local_estimate(state, goal)

    def _oracle_estimate(self, state: np.ndarray, goal: np.ndarray) -> int:
        key = canonical_key(state)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("oracle cache hit for %s", key)
            return cached

        self.oracle_calls += 1
        try:
            raw = self.oracle.estimate(state, goal)
        except OracleError as e:
            logger.warning("Oracle heuristic failed, falling back to local estimate: %s", e)
            return self.local_estimate(state, goal)

        try:
            value = int(raw)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Oracle returned malformed estimate %r, falling back to local estimate", raw)
            return self.local_estimate(state, goal)

        low, high = self.bounds
        if not low < value < high:
            logger.debug("oracle estimate %d outside (%d, %d), ignored", value, low, high)
            return self.local_estimate(state, goal)

        self.cache[key] = value
        return value
