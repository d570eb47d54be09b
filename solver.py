import logging
from typing import Dict, List, Optional

import kociemba
import numpy as np
from argdantic import ArgParser

from cube_astar import (
    HeuristicOracle,
    Scramble,
    SolverConfig,
    apply_moves,
    build_oracle,
    format_moves,
    is_goal,
    load_config,
    parse_moves,
    scramble,
    solve_cube,
    solved_state,
    to_kociemba_string,
)

cli = ArgParser()


def reference_length(state: np.ndarray) -> Optional[int]:
    """Length of kociemba's two-phase solution (full 18-move set), for comparison."""
    if is_goal(state, solved_state()):
        return 0
    try:
        return len(kociemba.solve(to_kociemba_string(state)).split())
    except ValueError as e:
        print(f"  kociemba rejected state: {e}")
        return None


def make_scrambles(config: SolverConfig) -> List[Scramble]:
    if config.scramble is not None:
        moves = parse_moves(config.scramble)
        return [Scramble(apply_moves(solved_state(), moves), moves)]

    rng = np.random.default_rng(config.seed)
    return [scramble(config.scramble_moves, rng) for _ in range(config.num_cubes)]


def run_evaluation(config: SolverConfig, oracle: Optional[HeuristicOracle] = None) -> List[Dict]:
    scrambles = make_scrambles(config)
    goal = solved_state()

    print(f"\n{'='*60}")
    print(f"Solving {len(scrambles)} cube(s), oracle: {config.oracle.kind if oracle else 'none'}")
    if config.scramble is None:
        print(f"Scramble moves: {config.scramble_moves}, Seed: {config.seed}")
    print(f"{'='*60}\n")

    results = []

    for i, (state, moves) in enumerate(scrambles):
        print(f"Cube {i+1}/{len(scrambles)}: scramble = {format_moves(moves) or '(none)'}")

        result = solve_cube(
            state, goal, oracle=oracle, config=config.search,
            progress=config.progress, max_expansions=config.max_expansions,
        )

        # replay the returned moves to make sure they really solve the cube
        verified = result.solved and is_goal(apply_moves(state, result.moves), goal)

        if result.solved:
            mark = "✓" if verified else "✗ (replay failed)"
            print(f"  {mark} Solved in {len(result.moves)} moves: {' '.join(result.moves)}")
        elif result.abandoned:
            print(f"  ✗ Gave up after {result.states_explored} states")
        else:
            print(f"  ✗ No solution found")
        print(f"    States: {result.states_explored}, Time: {result.time_ms:.1f}ms, Oracle calls: {result.oracle_calls}")

        entry = {
            "scramble": [m.value for m in moves],
            "solution": result.moves if result.solved else None,
            "verified": verified,
            "solution_length": len(result.moves) if result.solved else None,
            "states_explored": result.states_explored,
            "time_ms": result.time_ms,
            "oracle_calls": result.oracle_calls,
        }
        if config.reference:
            entry["reference_length"] = reference_length(state)
            print(f"    Reference (kociemba): {entry['reference_length']} moves")
        results.append(entry)

    solved = [r for r in results if r["solution"] is not None]

    print(f"\n{'='*60}")
    print("Summary")
    print(f"{'='*60}")
    print(f"Solved: {len(solved)}/{len(results)} ({100*len(solved)/max(1, len(results)):.1f}%)")

    if solved:
        avg_length = sum(r["solution_length"] for r in solved) / len(solved)
        avg_states = sum(r["states_explored"] for r in solved) / len(solved)
        avg_time = sum(r["time_ms"] for r in solved) / len(solved)
        avg_oracle = sum(r["oracle_calls"] for r in solved) / len(solved)

        print(f"Avg solution length: {avg_length:.2f}")
        print(f"Avg states explored: {avg_states:.1f}")
        print(f"Avg time: {avg_time:.1f}ms")
        print(f"Avg oracle calls: {avg_oracle:.1f}")

    return results


@cli.command(singleton=True)
def solve(config: SolverConfig):
    if config.config_path:
        config = load_config(config.config_path)
    logging.basicConfig(level=config.log_level.upper())

    oracle = build_oracle(config.oracle)
    run_evaluation(config, oracle)


if __name__ == "__main__":
    cli()
