from __future__ import annotations

from enum import StrEnum

from statemachine import State, StateMachine


class DispatchPhase(StrEnum):
    running = "running"
    stopped = "stopped"


class DispatchFSM(StateMachine):
    """Lifecycle of a dispatch loop.

    - running: draining the channel and invoking listeners
    - stopped: channel ended, loop aborted, or a listener failed; terminal
    """

    draining = State(DispatchPhase.running.value, value=DispatchPhase.running.value, initial=True)
    halted = State(DispatchPhase.stopped.value, value=DispatchPhase.stopped.value, final=True)

    halt = draining.to(halted)

    @property
    def phase(self) -> DispatchPhase:
        return DispatchPhase.stopped if self.halted.is_active else DispatchPhase.running
