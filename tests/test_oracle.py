import pytest
import requests

from cube_astar import (
    GeminiOracle,
    HeuristicProvider,
    OracleError,
    apply_move,
    describe_state,
    parse_estimate,
    solved_state,
)
from cube_astar.oracle import build_prompt
from cube_astar.state import GOAL_DESCRIPTION

GOAL = solved_state()
STATE = apply_move(GOAL, "U")


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.body


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_parse_estimate_takes_first_integer():
    assert parse_estimate("About 12 moves, maybe 13.") == 12
    assert parse_estimate("  7\n") == 7


@pytest.mark.parametrize("text", ["", "no idea", None])
def test_parse_estimate_without_integer(text):
    with pytest.raises(OracleError):
        parse_estimate(text)


def test_prompt_contains_state_and_goal():
    prompt = build_prompt(STATE)
    assert describe_state(STATE) in prompt
    assert GOAL_DESCRIPTION in prompt


def test_gemini_oracle_parses_reply(monkeypatch):
    seen = {}

    def fake_post(url, params=None, json=None, headers=None, timeout=None):
        seen.update(url=url, params=params, json=json, timeout=timeout)
        return FakeResponse(gemini_body("Estimate: 9"))

    monkeypatch.setattr(requests, "post", fake_post)
    oracle = GeminiOracle("secret", model="gemini-pro", timeout=3.0)

    assert oracle.estimate(STATE, GOAL) == 9
    assert seen["url"].endswith("/models/gemini-pro:generateContent")
    assert seen["params"] == {"key": "secret"}
    assert seen["timeout"] == 3.0
    assert describe_state(STATE) in seen["json"]["contents"][0]["parts"][0]["text"]


def test_gemini_oracle_timeout(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.Timeout("timed out")

    monkeypatch.setattr(requests, "post", fake_post)
    with pytest.raises(OracleError):
        GeminiOracle("secret").estimate(STATE, GOAL)


def test_gemini_oracle_http_error(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse({}, status_code=403))
    with pytest.raises(OracleError):
        GeminiOracle("secret").estimate(STATE, GOAL)


@pytest.mark.parametrize("body", [{}, {"candidates": []}, gemini_body("I cannot tell")])
def test_gemini_oracle_malformed_reply(monkeypatch, body):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(body))
    with pytest.raises(OracleError):
        GeminiOracle("secret").estimate(STATE, GOAL)


def test_unreachable_oracle_does_not_break_estimates(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(requests, "post", fake_post)
    provider = HeuristicProvider(GeminiOracle("secret"), interval=1)

    assert provider.smart_estimate(STATE, GOAL) == 2
    assert provider.oracle_calls == 1
    assert provider.cache == {}
