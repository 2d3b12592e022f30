from __future__ import annotations

from pathlib import Path

import pytest
import vdf

from gsi_server import GSIConfig, GSIServer
from gsi_server.errors import GameNotFoundError, SteamNotFoundError
from gsi_server.install_dir import GAME_DIR_NAME, find_cfg_folder, library_folders


def _make_cfg(library: Path) -> Path:
    cfg = library / "steamapps" / "common" / GAME_DIR_NAME / "csgo" / "cfg"
    cfg.mkdir(parents=True)
    return cfg


def _write_libraryfolders(steam: Path, folders: dict[str, object]) -> None:
    (steam / "steamapps").mkdir(parents=True, exist_ok=True)
    (steam / "steamapps" / "libraryfolders.vdf").write_text(
        vdf.dumps({"libraryfolders": folders}, pretty=True), encoding="utf-8"
    )


def test_finds_game_in_library_that_lists_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    steam = tmp_path / "steam"
    other = tmp_path / "games"
    _write_libraryfolders(
        steam,
        {
            "0": {"path": str(steam), "apps": {"440": "1"}},
            "1": {"path": str(other), "apps": {"730": "123"}},
        },
    )
    cfg = _make_cfg(other)
    monkeypatch.setenv("GSI_STEAM_DIR", str(steam))

    assert find_cfg_folder() == cfg


def test_falls_back_to_steam_root_without_manifest(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    steam = tmp_path / "steam"
    (steam / "steamapps").mkdir(parents=True)
    cfg = _make_cfg(steam)
    monkeypatch.setenv("GSI_STEAM_DIR", str(steam))

    assert find_cfg_folder() == cfg


def test_reads_legacy_manifest_layout(tmp_path: Path) -> None:
    steam = tmp_path / "steam"
    _write_libraryfolders(steam, {"TimeNextStatsReport": "0", "1": str(tmp_path / "lib")})

    libs = library_folders(steam)

    assert [p for p, _ in libs] == [steam, tmp_path / "lib"]


def test_missing_steam_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GSI_STEAM_DIR", str(tmp_path / "nowhere"))

    with pytest.raises(SteamNotFoundError):
        find_cfg_folder()


def test_missing_game_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    steam = tmp_path / "steam"
    _write_libraryfolders(steam, {"0": {"path": str(steam), "apps": {}}})
    monkeypatch.setenv("GSI_STEAM_DIR", str(steam))

    with pytest.raises(GameNotFoundError):
        find_cfg_folder()


def test_server_install_uses_discovered_folder_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    steam = tmp_path / "steam"
    (steam / "steamapps").mkdir(parents=True)
    cfg = _make_cfg(steam)
    monkeypatch.setenv("GSI_STEAM_DIR", str(steam))

    server = GSIServer(GSIConfig(service_name="found"), 8090)
    server.install()
    target = cfg / "gamestate_integration_found.cfg"
    assert target.is_file()

    target.unlink()
    server.install()
    assert not target.exists()
