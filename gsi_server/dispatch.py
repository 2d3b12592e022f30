from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from gsi_server.channel import EventReceiver
from gsi_server.fsm import DispatchFSM, DispatchPhase
from gsi_server.listeners import AsyncListener, SyncListener

logger = logging.getLogger(__name__)


class Dispatcher:
    """Drains the event channel and fans each event out to the listeners.

    Contract:
      - events are handled one at a time, in channel order
      - per event: every sync listener (registration order), then every async
        listener awaited one after another (registration order)
      - each listener gets its own copy of the event
      - a listener exception halts the loop and propagates out of `run()`
      - on any exit the receiver is closed, so producers see the loop is gone
    """

    def __init__(
        self,
        receiver: EventReceiver,
        *,
        sync_listeners: Sequence[SyncListener] = (),
        async_listeners: Sequence[AsyncListener] = (),
    ) -> None:
        self._receiver = receiver
        self._sync = tuple(sync_listeners)
        self._async = tuple(async_listeners)
        self._fsm = DispatchFSM()
        self._started = False
        self.dispatched = 0

    @property
    def phase(self) -> DispatchPhase:
        return self._fsm.phase

    async def run(self) -> None:
        if self._started:
            raise RuntimeError("dispatcher can only run once")
        self._started = True

        try:
            while (event := await self._receiver.pop()) is not None:
                for cb in self._sync:
                    cb(event.clone())

                for async_cb in self._async:
                    await async_cb(event.clone())

                self.dispatched += 1
            logger.info("Event channel closed after %d events; dispatch loop done", self.dispatched)
        except asyncio.CancelledError:
            logger.info("Dispatch loop aborted after %d events", self.dispatched)
            raise
        finally:
            self.close()

    def close(self) -> None:
        """Close the receiver and mark the loop stopped. Safe to call more than once.

        Covers an abort that lands before `run()` ever starts, where the
        coroutine is cancelled without executing its body.
        """

        self._receiver.close()
        if not self._fsm.halted.is_active:
            self._fsm.halt()
