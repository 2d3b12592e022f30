from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path

import vdf

from gsi_server.errors import InstallError

logger = logging.getLogger(__name__)


class Subscription(StrEnum):
    """Data components the game can be asked to send."""

    provider = "provider"
    map = "map"
    round = "round"
    player_id = "player_id"
    player_state = "player_state"
    player_weapons = "player_weapons"
    player_match_stats = "player_match_stats"
    player_position = "player_position"
    allplayers_id = "allplayers_id"
    allplayers_state = "allplayers_state"
    allplayers_match_stats = "allplayers_match_stats"
    allplayers_weapons = "allplayers_weapons"
    allplayers_position = "allplayers_position"
    phase_countdowns = "phase_countdowns"
    allgrenades = "allgrenades"
    bomb = "bomb"
    map_round_wins = "map_round_wins"


@dataclass(frozen=True, slots=True)
class GSIConfig:
    """Settings written into the game's `gamestate_integration_*.cfg`.

    Durations are seconds. `auth` is sent back verbatim in every payload, so a
    listener can tell which config produced an event.
    """

    service_name: str
    timeout: float = 1.1
    buffer: float = 0.1
    throttle: float = 1.0
    heartbeat: float = 60.0
    auth: dict[str, str] = field(default_factory=dict)
    precision_time: int = 3
    precision_position: int = 1
    precision_vector: int = 3
    subscriptions: frozenset[Subscription] = frozenset()

    def __post_init__(self) -> None:
        if not self.service_name or not self.service_name.replace("_", "").replace("-", "").isalnum():
            raise ValueError(f"service_name must be alphanumeric (plus '_' or '-'), got {self.service_name!r}")
        # Own copies, so later changes to the caller's containers don't leak into render().
        object.__setattr__(self, "auth", dict(self.auth))
        object.__setattr__(self, "subscriptions", frozenset(Subscription(s) for s in self.subscriptions))

    def with_subscriptions(self, *subs: Subscription | str) -> GSIConfig:
        return replace(self, subscriptions=self.subscriptions | {Subscription(s) for s in subs})

    def with_auth(self, key: str, value: str) -> GSIConfig:
        return replace(self, auth={**self.auth, key: value})

    @property
    def file_name(self) -> str:
        return f"gamestate_integration_{self.service_name}.cfg"

    def render(self, port: int) -> str:
        body: dict[str, object] = {
            "uri": f"http://127.0.0.1:{port}",
            "timeout": str(self.timeout),
            "buffer": str(self.buffer),
            "throttle": str(self.throttle),
            "heartbeat": str(self.heartbeat),
        }
        if self.auth:
            body["auth"] = dict(self.auth)
        body["output"] = {
            "precision_time": str(self.precision_time),
            "precision_position": str(self.precision_position),
            "precision_vector": str(self.precision_vector),
        }
        # Enum order keeps the file stable across runs.
        body["data"] = {s.value: "1" for s in Subscription if s in self.subscriptions}

        return vdf.dumps({self.service_name: body}, pretty=True)

    def install_into(self, cfg_folder: Path | str, port: int) -> Path:
        """Write the config file into the game's cfg folder and return its path."""

        folder = Path(cfg_folder)
        if not folder.is_dir():
            raise InstallError(f"cfg folder does not exist: {folder}")

        path = folder / self.file_name
        try:
            path.write_text(self.render(port), encoding="utf-8")
        except OSError as e:
            raise InstallError(f"could not write {path}: {e}") from e

        logger.info("Installed %s", path)
        return path
