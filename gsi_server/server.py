from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import uvicorn

from gsi_server import install_dir
from gsi_server.channel import EventSender, event_channel
from gsi_server.config import GSIConfig
from gsi_server.dispatch import Dispatcher
from gsi_server.listeners import AsyncListener, ListenerRegistry, SyncListener
from gsi_server.main import create_app

logger = logging.getLogger(__name__)

HOST = "127.0.0.1"


class GSIServer:
    """Receives game-state updates over HTTP and hands them to registered listeners.

    Usage:
        server = GSIServer(config, port=8090)
        server.add_event_listener(print)
        handle = server.run()   # inside a running event loop
        ...
        handle.stop()

    `run()` consumes the server: no listeners can be added afterwards and it
    cannot be started twice.
    """

    def __init__(self, config: GSIConfig, port: int, *, log_level: str = "info") -> None:
        self.port = port
        self.config = config
        self.installed = False
        self.log_level = log_level
        self._listeners = ListenerRegistry()
        self._consumed = False

    def install(self) -> GSIServer:
        """Install the config into the game's cfg folder. Only the first call writes."""

        if not self.installed:
            self.install_into(install_dir.find_cfg_folder())
        return self

    def install_into(self, cfg_folder: Path | str) -> GSIServer:
        if not self.installed:
            self.config.install_into(cfg_folder, self.port)
            self.installed = True
        return self

    def add_event_listener(self, cb: SyncListener) -> SyncListener:
        self._ensure_not_consumed()
        self._listeners.add(cb)
        return cb

    def add_async_event_listener(self, cb: AsyncListener) -> AsyncListener:
        self._ensure_not_consumed()
        self._listeners.add_async(cb)
        return cb

    def _ensure_not_consumed(self) -> None:
        if self._consumed:
            raise RuntimeError("server is already running")

    def run(self) -> ServerHandle:
        """Start listening and dispatching. Returns without waiting for the server to stop.

        Must be called from inside a running event loop. Installation errors
        are raised here, before anything is spawned; bind errors are only
        logged from the HTTP task.
        """

        self._ensure_not_consumed()
        asyncio.get_running_loop()  # raises outside a running loop
        self._consumed = True

        if not self.installed:
            self.install()

        sender, receiver = event_channel()
        listeners = self._listeners.freeze()

        logger.info("Starting server on %s:%d", HOST, self.port)
        http_server = uvicorn.Server(
            uvicorn.Config(
                create_app(sender),
                host=HOST,
                port=self.port,
                log_level=self.log_level,
                log_config=None,
                lifespan="off",
            )
        )
        http_task = asyncio.create_task(_serve_http(http_server, sender), name=f"gsi-http:{self.port}")

        logger.info("Listening for events...")
        dispatcher = Dispatcher(receiver, sync_listeners=listeners.sync, async_listeners=listeners.async_)
        dispatch_task = asyncio.create_task(dispatcher.run(), name=f"gsi-dispatch:{self.port}")
        dispatch_task.add_done_callback(_log_dispatch_exit)

        return ServerHandle(dispatch_task=dispatch_task, http_task=http_task, http_server=http_server, dispatcher=dispatcher)


class ServerHandle:
    """Stops a running server: aborts the dispatch loop and shuts the HTTP listener down gracefully."""

    def __init__(
        self,
        *,
        dispatch_task: asyncio.Task[None],
        http_task: asyncio.Task[None],
        http_server: uvicorn.Server,
        dispatcher: Dispatcher,
    ) -> None:
        self._dispatch_task = dispatch_task
        self._http_task = http_task
        self._http_server = http_server
        self.dispatcher = dispatcher
        self._used = False

    @property
    def listening(self) -> bool:
        return bool(self._http_server.started) and not self._http_task.done()

    def stop(self) -> None:
        if self._used:
            raise RuntimeError("server handle was already used to stop the server")
        self._used = True

        self._dispatch_task.cancel()
        self.dispatcher.close()
        # uvicorn stops accepting and lets in-flight requests finish.
        self._http_server.should_exit = True

    async def wait(self) -> None:
        """Wait until both the dispatch loop and the HTTP listener have finished."""

        await asyncio.gather(self._dispatch_task, self._http_task, return_exceptions=True)


async def _serve_http(server: uvicorn.Server, sender: EventSender) -> None:
    config = server.config
    try:
        await server.serve()
    except SystemExit:
        # uvicorn exits the process when it cannot bind.
        logger.error("HTTP listener on %s:%d failed to start", config.host, config.port)
    except Exception:
        logger.exception("HTTP listener on %s:%d crashed", config.host, config.port)
    finally:
        # A stop that lands during startup makes uvicorn return without its shutdown step.
        for listener in getattr(server, "servers", []):
            listener.close()
        sender.close()


def _log_dispatch_exit(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Dispatch loop halted by a failing listener", exc_info=exc)
