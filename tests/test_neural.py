import numpy as np
import pytest
import torch

from cube_astar import OracleError, scramble, solved_state
from cube_astar.neural import INPUT_SIZE, FCHeuristicNet, NeuralOracle, state_to_onehot


def save_small_checkpoint(path, hidden_size=16, num_layers=3, arch=None):
    torch.manual_seed(0)
    model = FCHeuristicNet(INPUT_SIZE, hidden_size, num_layers)
    torch.save({
        'model_state_dict': model.state_dict(),
        'arch': arch or {'hidden_size': hidden_size, 'num_layers': num_layers},
    }, path)
    return model


def test_onehot_encoding():
    encoded = state_to_onehot(solved_state())
    assert encoded.shape == (INPUT_SIZE,)
    assert encoded.sum() == 54
    # first sticker is on the Up face, value 0
    assert encoded[:6].tolist() == [1, 0, 0, 0, 0, 0]


def test_network_output_shape():
    model = FCHeuristicNet(INPUT_SIZE, 16, 3)
    out = model(torch.zeros(4, INPUT_SIZE))
    assert out.shape == (4,)


def test_neural_oracle_estimates(tmp_path):
    path = tmp_path / "model.pt"
    save_small_checkpoint(path)
    oracle = NeuralOracle(path, device="cpu")

    states = [scramble(n, rng=n).state for n in range(5)]
    estimates = [oracle.estimate(s, solved_state()) for s in states]
    assert all(isinstance(e, int) and e >= 0 for e in estimates)
    assert len(oracle.batch_call(states)) == 5
    assert oracle.batch_call([]) == []


def test_missing_checkpoint(tmp_path):
    with pytest.raises(OracleError):
        NeuralOracle(tmp_path / "missing.pt")


def test_checkpoint_architecture_mismatch(tmp_path):
    path = tmp_path / "model.pt"
    save_small_checkpoint(path, hidden_size=16, arch={'hidden_size': 32, 'num_layers': 3})
    with pytest.raises(OracleError):
        NeuralOracle(path)


def test_training_writes_loadable_checkpoint(tmp_path):
    from train_heuristic_fc import TrainConfig, train_model

    config = TrainConfig(
        train_size=16, val_size=8, test_size=8,
        min_scramble_moves=1, max_scramble_moves=4,
        hidden_size=16, num_layers=3,
        batch_size=8, epochs=1,
        checkpoint_dir=str(tmp_path), wandb_mode="disabled", device="cpu",
    )
    final_path = train_model(config)

    assert final_path.exists()
    assert (final_path.parent / "best_model.pt").exists()
    oracle = NeuralOracle(final_path)
    assert oracle.estimate(scramble(3, rng=1).state, solved_state()) >= 0


def test_non_finite_output_raises_oracle_error(tmp_path):
    path = tmp_path / "model.pt"
    save_small_checkpoint(path)
    oracle = NeuralOracle(path, device="cpu")
    with torch.no_grad():
        oracle.model.network[-1].bias.fill_(float("inf"))

    with pytest.raises(OracleError):
        oracle.estimate(solved_state(), solved_state())
