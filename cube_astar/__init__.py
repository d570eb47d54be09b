from .state import (
    Face,
    solved_state,
    as_state,
    is_goal,
    canonical_key,
    has_valid_counts,
    describe_state,
    to_kociemba_string,
)

from .moves import (
    Move,
    MOVES,
    apply_move,
    apply_moves,
    parse_moves,
    format_moves,
    invert_moves,
    simplify_moves,
)

from .heuristic import (
    local_estimate,
    HeuristicProvider,
)

from .oracle import (
    HeuristicOracle,
    OracleError,
    GeminiOracle,
    parse_estimate,
)

from .search import (
    AStarSearch,
    SearchNode,
    SolveResult,
    StepOutcome,
    StepStatus,
    solve_cube,
    solve_cube_async,
)

from .scramble import (
    Scramble,
    scramble,
)

from .config import (
    SearchConfig,
    OracleConfig,
    SolverConfig,
    load_config,
    build_oracle,
)

__all__ = [
    'Face',
    'solved_state',
    'as_state',
    'is_goal',
    'canonical_key',
    'has_valid_counts',
    'describe_state',
    'to_kociemba_string',
    'Move',
    'MOVES',
    'apply_move',
    'apply_moves',
    'parse_moves',
    'format_moves',
    'invert_moves',
    'simplify_moves',
    'local_estimate',
    'HeuristicProvider',
    'HeuristicOracle',
    'OracleError',
    'GeminiOracle',
    'parse_estimate',
    'AStarSearch',
    'SearchNode',
    'SolveResult',
    'StepOutcome',
    'StepStatus',
    'solve_cube',
    'solve_cube_async',
    'Scramble',
    'scramble',
    'SearchConfig',
    'OracleConfig',
    'SolverConfig',
    'load_config',
    'build_oracle',
]
