from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from gsi_server.api.models import Event
from gsi_server.errors import ChannelClosedError

_END = object()


class _ChannelState:
    __slots__ = ("queue", "senders", "receiver_closed", "exhausted")

    def __init__(self) -> None:
        self.queue: asyncio.Queue[object] = asyncio.Queue()
        self.senders = 0
        self.receiver_closed = False
        self.exhausted = False


class EventSender:
    """Producer end of the event channel.

    Each HTTP request handler shares one sender; extra producers get their own
    via `clone()`. When the last open sender is closed the receiver sees
    end-of-stream once the queue drains.
    """

    __slots__ = ("_state", "_closed")

    def __init__(self, state: _ChannelState) -> None:
        self._state = state
        self._closed = False
        state.senders += 1

    def push(self, event: Event) -> None:
        """Enqueue without waiting. Raises ChannelClosedError if nobody will read it."""

        if self._closed:
            raise ChannelClosedError("sender is closed")
        if self._state.receiver_closed:
            raise ChannelClosedError("receiver is closed")
        self._state.queue.put_nowait(event)

    def clone(self) -> EventSender:
        if self._closed:
            raise ChannelClosedError("sender is closed")
        return EventSender(self._state)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._state.senders -= 1
        if self._state.senders == 0:
            self._state.queue.put_nowait(_END)

    @property
    def is_closed(self) -> bool:
        return self._closed or self._state.receiver_closed


class EventReceiver:
    """Consumer end of the event channel. Owned by exactly one dispatch loop."""

    __slots__ = ("_state",)

    def __init__(self, state: _ChannelState) -> None:
        self._state = state

    async def pop(self) -> Event | None:
        """Next event in push order, or None once every sender is gone and the queue is empty."""

        state = self._state
        if state.exhausted or state.receiver_closed:
            return None
        item = await state.queue.get()
        if item is _END:
            state.exhausted = True
            return None
        return item  # type: ignore[return-value]

    def close(self) -> None:
        """Drop the consumer end. Queued events are discarded and later pushes fail."""

        state = self._state
        state.receiver_closed = True
        while not state.queue.empty():
            state.queue.get_nowait()

    @property
    def is_closed(self) -> bool:
        return self._state.receiver_closed

    def __aiter__(self) -> AsyncIterator[Event]:
        return self._iter()

    async def _iter(self) -> AsyncIterator[Event]:
        while (event := await self.pop()) is not None:
            yield event


def event_channel() -> tuple[EventSender, EventReceiver]:
    """Create an unbounded FIFO channel with one sender and one receiver."""

    state = _ChannelState()
    return EventSender(state), EventReceiver(state)
