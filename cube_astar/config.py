import logging
import os
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .oracle import GeminiOracle, HeuristicOracle

logger = logging.getLogger(__name__)


class SearchConfig(BaseModel):
    oracle_interval: int = 15  # consult the oracle on every Nth heuristic call
    impact: int = 8  # facelets a single move is assumed to fix

    # oracle estimates are accepted only strictly inside (oracle_min, oracle_max)
    oracle_min: int = 0
    oracle_max: int = 50

    @field_validator("oracle_interval", "impact")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def _bounds_ordered(self):
        if self.oracle_min >= self.oracle_max:
            raise ValueError("oracle_min must be smaller than oracle_max")
        return self


class OracleConfig(BaseModel):
    kind: Literal["none", "gemini", "neural"] = "none"

    # gemini
    model: str = "gemini-pro"
    api_key: Optional[str] = Field(default_factory=lambda: os.environ.get("GEMINI_API_KEY"))
    timeout: float = 10.0

    # neural
    checkpoint_path: Optional[str] = None
    device: str = "cpu"


class SolverConfig(BaseModel):
    config_path: Optional[str] = None  # when set, the YAML file replaces all other values

    num_cubes: int = 5
    scramble_moves: int = 6
    scramble: Optional[str] = None  # explicit move string, overrides random scrambles
    seed: int = 42

    max_expansions: Optional[int] = None
    progress: bool = False
    reference: bool = False  # also report kociemba's two-phase solution length
    log_level: str = "WARNING"

    search: SearchConfig = Field(default_factory=SearchConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)


def load_config(path: Union[str, Path]) -> SolverConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return SolverConfig(**data)


def build_oracle(config: OracleConfig) -> Optional[HeuristicOracle]:
    if config.kind == "gemini":
        if not config.api_key:
            logger.info("GEMINI_API_KEY not set, oracle disabled; using the local heuristic only")
            return None
        return GeminiOracle(config.api_key, model=config.model, timeout=config.timeout)

    if config.kind == "neural":
        if not config.checkpoint_path:
            raise ValueError("oracle.checkpoint_path is required for the neural oracle")
        from .neural import NeuralOracle

        return NeuralOracle(config.checkpoint_path, device=config.device)

    return None
