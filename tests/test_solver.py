import solver
from cube_astar import SolverConfig, apply_move, solved_state


def test_run_evaluation_random_scrambles():
    results = solver.run_evaluation(SolverConfig(num_cubes=2, scramble_moves=3, seed=1))
    assert len(results) == 2
    for entry in results:
        assert len(entry["scramble"]) == 3
        assert entry["verified"]
        assert entry["solution_length"] == len(entry["solution"])


def test_run_evaluation_explicit_scramble(capsys):
    results = solver.run_evaluation(SolverConfig(scramble="R U R' U' X"))
    assert len(results) == 1
    assert results[0]["scramble"] == ["R", "U", "R'", "U'"]
    assert results[0]["verified"]
    assert results[0]["solution_length"] <= 4
    assert "Solved: 1/1" in capsys.readouterr().out


def test_run_evaluation_reports_abandoned_search():
    results = solver.run_evaluation(SolverConfig(scramble="R", max_expansions=1))
    assert results[0]["solution"] is None
    assert not results[0]["verified"]


def test_reference_length(monkeypatch):
    seen = []

    def fake_solve(facelets):
        seen.append(facelets)
        return "R' "

    monkeypatch.setattr(solver.kociemba, "solve", fake_solve)

    assert solver.reference_length(solved_state()) == 0
    assert seen == []
    assert solver.reference_length(apply_move(solved_state(), "R")) == 1
    assert seen == ["UUFUUFUUFRRRRRRRRRFFDFFDFFDDDBDDBDDBLLLLLLLLLUBBUBBUBB"]
