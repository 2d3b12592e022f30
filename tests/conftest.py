from __future__ import annotations

import copy
import socket
from collections.abc import Callable
from typing import Any

import pytest


_SAMPLE_EVENT: dict[str, Any] = {
    "provider": {
        "name": "Counter-Strike: Global Offensive",
        "appid": 730,
        "version": 13879,
        "steamid": "76561198282622073",
        "timestamp": 1692028800,
    },
    "map": {
        "mode": "casual",
        "name": "de_dust2",
        "phase": "live",
        "round": 3,
        "team_ct": {"score": 2, "timeouts_remaining": 1, "matches_won_this_series": 0},
        "team_t": {"score": 1, "timeouts_remaining": 1, "matches_won_this_series": 0},
        "num_matches_to_win_series": 0,
        "current_spectators": 0,
        "souvenirs_total": 0,
    },
    "player": {
        "steamid": "76561198282622073",
        "name": "player one",
        "observer_slot": 1,
        "team": "CT",
        "activity": "playing",
        "state": {"health": 100, "armor": 100, "helmet": True, "money": 800},
    },
    "auth": {"token": "local-dev"},
    # Not modelled explicitly; must still survive the round trip.
    "previously": {"player": {"state": {"health": 90}}},
}


@pytest.fixture(autouse=True)
def _hermetic_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's GSI_* variables from leaking into tests."""

    for key in ("GSI_STEAM_DIR", "GSI_PORT", "GSI_SERVICE_NAME", "GSI_CFG_DIR"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def event_body() -> dict[str, Any]:
    return copy.deepcopy(_SAMPLE_EVENT)


@pytest.fixture()
def make_event_body() -> Callable[[int], dict[str, Any]]:
    """Distinct payloads, told apart by `provider.timestamp`."""

    def _make(n: int) -> dict[str, Any]:
        body = copy.deepcopy(_SAMPLE_EVENT)
        body["provider"]["timestamp"] = 1692028800 + n
        return body

    return _make


@pytest.fixture()
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])
