from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt


class _Section(BaseModel):
    # The game adds fields between releases; keep whatever it sends. Known
    # numeric fields are StrictInt so a quoted number is rejected, not rewritten.
    model_config = ConfigDict(extra="allow")


class Provider(_Section):
    name: str | None = None
    appid: StrictInt | None = None
    version: StrictInt | None = None
    steamid: str | None = None
    timestamp: StrictInt | None = None


class TeamState(_Section):
    score: StrictInt | None = None
    name: str | None = None
    timeouts_remaining: StrictInt | None = None
    matches_won_this_series: StrictInt | None = None


class MapState(_Section):
    mode: str | None = None
    name: str | None = None
    phase: str | None = None
    round: StrictInt | None = None
    team_ct: TeamState | None = None
    team_t: TeamState | None = None
    num_matches_to_win_series: StrictInt | None = None
    current_spectators: StrictInt | None = None
    souvenirs_total: StrictInt | None = None
    round_wins: dict[str, str] | None = None


class PlayerState(_Section):
    steamid: str | None = None
    clan: str | None = None
    name: str | None = None
    observer_slot: StrictInt | None = None
    team: str | None = None
    activity: str | None = None
    state: dict[str, Any] | None = None
    match_stats: dict[str, Any] | None = None
    weapons: dict[str, Any] | None = None
    position: str | None = None
    forward: str | None = None


class Event(_Section):
    """One game-state snapshot as pushed by the game.

    Every section is optional: what the game sends depends on the
    subscriptions written into its config file.
    """

    provider: Provider | None = None
    map: MapState | None = None
    player: PlayerState | None = None
    auth: dict[str, str] | None = None

    def clone(self) -> "Event":
        return self.model_copy(deep=True)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready body with only the fields the sender actually set."""

        return self.model_dump(mode="json", exclude_unset=True)
