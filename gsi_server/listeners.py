from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from gsi_server.api.models import Event

SyncListener = Callable[[Event], None]
AsyncListener = Callable[[Event], Awaitable[None]]


def _is_coroutine_callable(fn: object) -> bool:
    while isinstance(fn, functools.partial):
        fn = fn.func
    if inspect.iscoroutinefunction(fn):
        return True
    # Instances with an `async def __call__`.
    return not inspect.isroutine(fn) and inspect.iscoroutinefunction(getattr(fn, "__call__", None))


@dataclass(frozen=True, slots=True)
class FrozenListeners:
    sync: tuple[SyncListener, ...]
    async_: tuple[AsyncListener, ...]


@dataclass(slots=True)
class ListenerRegistry:
    """Ordered sync and async listeners. Registration order is invocation order."""

    sync: list[SyncListener] = field(default_factory=list)
    async_: list[AsyncListener] = field(default_factory=list)

    def add(self, fn: SyncListener) -> None:
        if not callable(fn):
            raise TypeError(f"{fn!r} is not callable")
        if _is_coroutine_callable(fn):
            raise TypeError(f"{fn!r} is a coroutine function; register it as an async listener")
        self.sync.append(fn)

    def add_async(self, fn: AsyncListener) -> None:
        if not _is_coroutine_callable(fn):
            raise TypeError(f"{fn!r} is not a coroutine function; register it as a sync listener")
        self.async_.append(fn)

    def freeze(self) -> FrozenListeners:
        return FrozenListeners(sync=tuple(self.sync), async_=tuple(self.async_))

    def __len__(self) -> int:
        return len(self.sync) + len(self.async_)
