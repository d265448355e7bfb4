"""Bounded history of completed phases for the training-log view."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..core.network import Network
from ..core.types import ALL, Array, Phase, PhaseFilter

DEFAULT_CAPACITY = 500


def _frozen(values) -> Array:
    arr = np.array(values, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


def _frozen_stack(values) -> Tuple[Array, ...]:
    return tuple(_frozen(v) for v in values)


def _resolve_filter(phase: PhaseFilter) -> Optional[Phase]:
    if phase == ALL:
        return None
    return Phase(phase)


@dataclass(frozen=True)
class TrainingLogEntry:
    """Read-only snapshot of the network taken right after a phase completed."""

    phase: Phase
    epoch: int
    timestamp: float
    layer_sizes: Tuple[int, ...]
    inputs: Array
    target: float
    learning_rate: float
    hidden_net_inputs: Tuple[Array, ...]
    hidden_activations: Tuple[Array, ...]
    output_net_inputs: Array
    output_activations: Array
    output_gradients: Array
    hidden_gradients: Tuple[Array, ...]
    weights: Tuple[Array, ...]
    biases: Tuple[Array, ...]
    total_error: float
    raw_error: float

    @classmethod
    def capture(cls, network: Network, phase: Phase, timestamp: float) -> "TrainingLogEntry":
        return cls(
            phase=Phase(phase),
            epoch=int(network.epoch),
            timestamp=float(timestamp),
            layer_sizes=tuple(network.layer_sizes),
            inputs=_frozen(network.inputs),
            target=float(network.target),
            learning_rate=float(network.learning_rate),
            hidden_net_inputs=_frozen_stack(network.hidden_net_inputs),
            hidden_activations=_frozen_stack(network.hidden_activations),
            output_net_inputs=_frozen(network.output_net_inputs),
            output_activations=_frozen(network.output_activations),
            output_gradients=_frozen(network.output_gradients),
            hidden_gradients=_frozen_stack(network.hidden_gradients),
            weights=_frozen_stack(network.weights),
            biases=_frozen_stack(network.biases),
            total_error=float(network.total_error),
            raw_error=float(network.raw_error),
        )

    def to_record(self) -> Dict[str, object]:
        """Plain JSON-serialisable form of the entry."""

        def _lists(stack: Tuple[Array, ...]) -> List[list]:
            return [arr.tolist() for arr in stack]

        return {
            "phase": self.phase.value,
            "epoch": self.epoch,
            "timestamp": self.timestamp,
            "layer_sizes": list(self.layer_sizes),
            "inputs": self.inputs.tolist(),
            "target": self.target,
            "learning_rate": self.learning_rate,
            "hidden_net_inputs": _lists(self.hidden_net_inputs),
            "hidden_activations": _lists(self.hidden_activations),
            "output_net_inputs": self.output_net_inputs.tolist(),
            "output_activations": self.output_activations.tolist(),
            "output_gradients": self.output_gradients.tolist(),
            "hidden_gradients": _lists(self.hidden_gradients),
            "weights": _lists(self.weights),
            "biases": _lists(self.biases),
            "total_error": self.total_error,
            "raw_error": self.raw_error,
        }


class PhaseView:
    """Lazy, re-iterable view of the log restricted to one phase."""

    def __init__(self, log: "TrainingLog", phase: PhaseFilter = ALL) -> None:
        self._log = log
        self.phase = _resolve_filter(phase)

    def __iter__(self) -> Iterator[TrainingLogEntry]:
        for entry in self._log:
            if self.phase is None or entry.phase is self.phase:
                yield entry

    def __len__(self) -> int:
        return sum(1 for _ in self)


class TrainingLog:
    """Append-only log keeping the most recent ``capacity`` entries."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._entries: Deque[TrainingLogEntry] = deque(maxlen=capacity)
        self._clock = clock

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, network: Network, phase: Phase) -> TrainingLogEntry:
        entry = TrainingLogEntry.capture(network, phase, self._clock())
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def filter_by_phase(self, phase: PhaseFilter = ALL) -> PhaseView:
        return PhaseView(self, phase)

    def entries(self) -> List[TrainingLogEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[TrainingLogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> TrainingLogEntry:
        return self._entries[index]


__all__ = ["DEFAULT_CAPACITY", "PhaseView", "TrainingLog", "TrainingLogEntry"]
