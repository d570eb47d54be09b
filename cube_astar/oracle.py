"""External heuristic oracles.

An oracle is an untrusted, best-effort estimator of the number of moves left
to solve a state. Implementations raise ``OracleError`` for every failure;
the heuristic provider catches it and falls back to the local estimate.
"""
import re
from abc import ABC, abstractmethod

import numpy as np
import requests

from .state import GOAL_DESCRIPTION, describe_state

_INT_RE = re.compile(r"\d+")

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class OracleError(Exception):
    """Raised when an oracle cannot produce a usable estimate."""


class HeuristicOracle(ABC):
    @abstractmethod
    def estimate(self, state: np.ndarray, goal: np.ndarray) -> int:
        """Estimated moves from ``state`` to ``goal``. Raises OracleError on failure."""


def parse_estimate(text: str) -> int:
    """First integer embedded in free-form text."""
    match = _INT_RE.search(text or "")
    if match is None:
        raise OracleError(f"No integer in oracle response: {text!r}")
    return int(match.group(0))


def build_prompt(state: np.ndarray) -> str:
    return f"""You are an expert Rubik's cube solver. Analyze this cube state and provide a heuristic estimate.

Rubik's Cube State:
{describe_state(state)}

SOLVED STATE (goal):
{GOAL_DESCRIPTION}

Consider how many pieces are displaced and how they relate to each other.
Respond with ONLY a single number: your best estimate of the moves needed to solve this cube state.
Be conservative - it is better to slightly underestimate than overestimate.
"""


class GeminiOracle(HeuristicOracle):
    """Asks a Gemini model over the Generative Language REST API."""

    def __init__(self, api_key: str, model: str = "gemini-pro", timeout: float = 10.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.url = GEMINI_ENDPOINT.format(model=model)

    def estimate(self, state: np.ndarray, goal: np.ndarray) -> int:
        payload = {"contents": [{"parts": [{"text": build_prompt(state)}]}]}
        try:
            response = requests.post(
                self.url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise OracleError(f"Gemini request failed: {e}") from e

        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise OracleError(f"Unexpected Gemini response shape: {body!r}") from e
        return parse_estimate(str(text).strip())
