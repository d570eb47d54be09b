"""Fully connected heuristic network and the oracle that wraps it."""
import math
import pickle
from pathlib import Path
from typing import List, Union

import numpy as np
import torch
import torch.nn as nn

from .oracle import HeuristicOracle, OracleError
from .state import NUM_FACES, NUM_STICKERS

INPUT_SIZE = NUM_STICKERS * NUM_FACES  # 54 positions, one-hot with 6 colors


class FCHeuristicNet(nn.Module):
    """Fully connected network with ReLU activations."""

    def __init__(self, input_size: int = INPUT_SIZE, hidden_size: int = 512, num_layers: int = 4, output_size: int = 1):
        super().__init__()

        layers = []

        # Input layer
        layers.append(nn.Linear(input_size, hidden_size))
        layers.append(nn.ReLU())

        # Hidden layers
        for _ in range(num_layers - 2):
            layers.append(nn.Linear(hidden_size, hidden_size))
            layers.append(nn.ReLU())

        # Output layer
        layers.append(nn.Linear(hidden_size, output_size))

        self.network = nn.Sequential(*layers)

    def forward(self, x):
        return self.network(x).squeeze(-1)


def state_to_onehot(state: np.ndarray) -> np.ndarray:
    one_hot = np.zeros((NUM_STICKERS, NUM_FACES), dtype=np.float32)
    one_hot[np.arange(NUM_STICKERS), np.asarray(state).ravel()] = 1.0
    return one_hot.flatten()


class NeuralOracle(HeuristicOracle):
    """Estimates distance with an ``FCHeuristicNet`` checkpoint from train_heuristic_fc.py."""

    def __init__(self, checkpoint_path: Union[str, Path], device: str = "cpu"):
        self.device = torch.device(device if torch.cuda.is_available() else "cpu")

        try:
            checkpoint = torch.load(checkpoint_path, map_location=self.device, weights_only=True)
        except (OSError, RuntimeError, pickle.UnpicklingError) as e:
            raise OracleError(f"Could not load heuristic checkpoint {checkpoint_path}: {e}") from e

        arch = checkpoint.get("arch", {})
        self.model = FCHeuristicNet(
            input_size=INPUT_SIZE,
            hidden_size=arch.get("hidden_size", 512),
            num_layers=arch.get("num_layers", 4),
        )
        state_dict = checkpoint.get("model_state_dict", checkpoint)
        try:
            self.model.load_state_dict(state_dict)
        except RuntimeError as e:
            raise OracleError(f"Checkpoint does not match network: {e}") from e

        self.model.to(self.device)
        self.model.eval()

    @torch.no_grad()
    def batch_call(self, states: List[np.ndarray]) -> List[float]:
        if not states:
            return []
        inputs = torch.from_numpy(np.stack([state_to_onehot(s) for s in states])).to(self.device)
        outputs = self.model(inputs)
        return [max(0.0, h) for h in outputs.cpu().tolist()]  # Ensure non-negative

    def estimate(self, state: np.ndarray, goal: np.ndarray) -> int:
        h = self.batch_call([state])[0]
        if not math.isfinite(h):
            raise OracleError(f"Network produced a non-finite estimate: {h}")
        return int(round(h))
