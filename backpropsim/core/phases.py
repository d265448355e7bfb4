"""Phase state machine driving one backpropagation step at a time."""

from __future__ import annotations

from typing import Callable, Dict

from .network import Network
from .passes import backward_pass, error_pass, forward_pass, update_pass
from .types import Phase

TRANSITIONS: Dict[Phase, Phase] = {
    Phase.IDLE: Phase.FORWARD,
    Phase.FORWARD: Phase.ERROR,
    Phase.ERROR: Phase.BACKWARD,
    Phase.BACKWARD: Phase.UPDATE,
    Phase.UPDATE: Phase.FORWARD,
}

PASSES: Dict[Phase, Callable[[Network], Network]] = {
    Phase.FORWARD: forward_pass,
    Phase.ERROR: error_pass,
    Phase.BACKWARD: backward_pass,
    Phase.UPDATE: update_pass,
}


class PhaseStateMachine:
    """Track the last completed phase and run the pass that follows it."""

    def __init__(self) -> None:
        self.phase = Phase.IDLE

    @property
    def next_phase(self) -> Phase:
        return TRANSITIONS[self.phase]

    def advance(self, network: Network) -> Phase:
        target = self.next_phase
        PASSES[target](network)
        self.phase = target
        return target

    def reset(self) -> None:
        self.phase = Phase.IDLE


__all__ = ["PASSES", "PhaseStateMachine", "TRANSITIONS"]
