"""Run a server locally and log every update the game sends.

Reads GSI_PORT / GSI_SERVICE_NAME / GSI_CFG_DIR (and GSI_STEAM_DIR for
discovery) from the environment or a repo `.env`.

Usage:
    uv run python scripts/listen.py
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from gsi_server import Event, GSIConfig, GSIServer, Subscription
from gsi_server.settings import settings_from_env

logger = logging.getLogger("gsi_server.listen")


async def _main() -> None:
    settings = settings_from_env()
    config = GSIConfig(service_name=settings.service_name).with_subscriptions(
        Subscription.provider,
        Subscription.map,
        Subscription.player_id,
        Subscription.player_state,
    )

    server = GSIServer(config, settings.port)
    if settings.cfg_dir is not None:
        server.install_into(settings.cfg_dir)

    @server.add_event_listener
    def _log_event(event: Event) -> None:
        map_name = event.map.name if event.map else None
        player = event.player.name if event.player else None
        logger.info("update: map=%s player=%s", map_name, player)

    handle = server.run()
    try:
        await asyncio.Event().wait()
    finally:
        handle.stop()
        await handle.wait()


def main() -> None:
    load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
