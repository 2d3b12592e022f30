from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import vdf

from gsi_server.errors import GameNotFoundError, InstallError, SteamNotFoundError

logger = logging.getLogger(__name__)

CSGO_APP_ID = "730"
GAME_DIR_NAME = "Counter-Strike Global Offensive"


def get_steam_dir_override() -> str | None:
    return os.environ.get("GSI_STEAM_DIR") or None


def _default_steam_dirs() -> list[Path]:
    home = Path.home()
    if sys.platform == "win32":
        return [Path(os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")) / "Steam"]
    if sys.platform == "darwin":
        return [home / "Library" / "Application Support" / "Steam"]
    return [home / ".steam" / "steam", home / ".local" / "share" / "Steam"]


def find_steam_dir() -> Path:
    override = get_steam_dir_override()
    candidates = [Path(override)] if override else _default_steam_dirs()
    for candidate in candidates:
        if (candidate / "steamapps").is_dir():
            return candidate
    raise SteamNotFoundError(f"no Steam installation found (looked in {', '.join(map(str, candidates))})")


def library_folders(steam_dir: Path) -> list[tuple[Path, set[str]]]:
    """Steam library roots with the app ids Steam says they hold.

    Handles both the current `libraryfolders.vdf` layout (nested dicts with
    `path` and `apps`) and the legacy one (index -> path strings). The Steam
    root itself always comes first.
    """

    libraries: list[tuple[Path, set[str]]] = []
    manifest = steam_dir / "steamapps" / "libraryfolders.vdf"
    if manifest.is_file():
        try:
            data = vdf.loads(manifest.read_text(encoding="utf-8", errors="replace"))
        except (OSError, SyntaxError) as e:
            raise InstallError(f"could not read {manifest}: {e}") from e

        root = next((v for k, v in data.items() if k.lower() == "libraryfolders"), {})
        for key, entry in root.items():
            if not key.isdigit():
                continue
            if isinstance(entry, dict):
                path = entry.get("path")
                apps = set((entry.get("apps") or {}).keys())
            else:
                path, apps = entry, set()
            if path:
                libraries.append((Path(path), apps))

    if not any(lib == steam_dir for lib, _ in libraries):
        libraries.insert(0, (steam_dir, set()))
    return libraries


def find_cfg_folder() -> Path:
    """Locate the game's `csgo/cfg` folder across all Steam libraries."""

    steam_dir = find_steam_dir()
    libraries = library_folders(steam_dir)

    # Libraries that claim the app first, then everything else as a fallback.
    ordered = [lib for lib, apps in libraries if CSGO_APP_ID in apps]
    ordered += [lib for lib, apps in libraries if CSGO_APP_ID not in apps]

    for lib in ordered:
        cfg = lib / "steamapps" / "common" / GAME_DIR_NAME / "csgo" / "cfg"
        if cfg.is_dir():
            logger.debug("Found cfg folder at %s", cfg)
            return cfg

    raise GameNotFoundError(f"{GAME_DIR_NAME} not found in any Steam library under {steam_dir}")
