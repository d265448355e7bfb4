"""Command/query facade over the network, phase machine, log and autoplay."""

from __future__ import annotations

import logging
import time
from typing import Callable, Mapping, Optional, Sequence

import numpy as np

from ..core.network import Network, default_network, in_bounds
from ..core.phases import PhaseStateMachine
from ..core.types import ALL, NeuronDetails, Phase, PhaseFilter, WeightDetails
from .autoplay import DEFAULT_INTERVAL, AsyncioScheduler, AutoplayController, Scheduler
from .log import DEFAULT_CAPACITY, PhaseView, TrainingLog, TrainingLogEntry

logger = logging.getLogger(__name__)


class TrainingEngine:
    """Own one network and step it through backpropagation on request.

    Every command runs to completion before returning. Presentation code reads
    state through the query properties and may register ``callbacks``: objects
    with ``on_phase(entry)`` and/or ``on_epoch(epoch, metrics)``, or plain
    callables receiving each new log entry.
    """

    def __init__(
        self,
        network: Network | None = None,
        *,
        scheduler: Scheduler | None = None,
        interval: float = DEFAULT_INTERVAL,
        log_capacity: int = DEFAULT_CAPACITY,
        seed: int = 0,
        callbacks: Sequence[object] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._network = network if network is not None else default_network()
        self._rng = np.random.default_rng(seed)
        self._phases = PhaseStateMachine()
        self._log = TrainingLog(capacity=log_capacity, clock=clock)
        self.callbacks = list(callbacks or [])
        self._autoplay = AutoplayController(
            self.advance_phase,
            lambda: self._network.epoch,
            scheduler or AsyncioScheduler(),
            interval=interval,
        )

    # ------------------------------------------------------------------
    # Queries

    @property
    def network(self) -> Network:
        """The live network. Treat as read-only; use the commands to edit."""

        return self._network

    def snapshot(self) -> Network:
        return self._network.copy()

    @property
    def phase(self) -> Phase:
        return self._phases.phase

    @property
    def next_phase(self) -> Phase:
        return self._phases.next_phase

    @property
    def is_autoplaying(self) -> bool:
        return self._autoplay.is_running

    @property
    def autoplay(self) -> AutoplayController:
        return self._autoplay

    @property
    def log(self) -> TrainingLog:
        return self._log

    def training_log(self, phase: PhaseFilter = ALL) -> PhaseView:
        return self._log.filter_by_phase(phase)

    def neuron_details(
        self, layer: str, index: int, hidden_layer_index: int | None = None
    ) -> Optional[NeuronDetails]:
        net = self._network
        if layer == "input":
            if not in_bounds(index, net.input_count):
                return None
            return NeuronDetails(layer="input", index=index, value=float(net.inputs[index]))
        if layer == "hidden":
            h = 0 if hidden_layer_index is None else hidden_layer_index
            if not in_bounds(h, len(net.hidden_layers)) or not in_bounds(
                index, net.hidden_layers[h]
            ):
                return None
            return NeuronDetails(
                layer="hidden",
                index=index,
                hidden_layer_index=h,
                value=float(net.hidden_activations[h][index]),
                net_input=float(net.hidden_net_inputs[h][index]),
                gradient=float(net.hidden_gradients[h][index]),
                bias=float(net.biases[h][index]),
            )
        if layer == "output":
            if not in_bounds(index, net.output_count):
                return None
            return NeuronDetails(
                layer="output",
                index=index,
                value=float(net.output_activations[index]),
                net_input=float(net.output_net_inputs[index]),
                gradient=float(net.output_gradients[index]),
                bias=float(net.biases[-1][index]),
            )
        return None

    def weight_details(
        self, matrix_index: int, source_index: int, target_index: int
    ) -> Optional[WeightDetails]:
        weights = self._network.weights
        if not in_bounds(matrix_index, len(weights)):
            return None
        W = weights[matrix_index]
        if not (in_bounds(source_index, W.shape[0]) and in_bounds(target_index, W.shape[1])):
            return None
        return WeightDetails(
            matrix_index=matrix_index,
            source_index=source_index,
            target_index=target_index,
            source_layer="input" if matrix_index == 0 else "hidden",
            target_layer="output" if matrix_index == len(weights) - 1 else "hidden",
            value=float(W[source_index, target_index]),
        )

    # ------------------------------------------------------------------
    # Commands

    def advance_phase(self) -> TrainingLogEntry:
        """Run the next pass, record it in the log and notify callbacks."""

        phase = self._phases.advance(self._network)
        entry = self._log.append(self._network, phase)
        logger.debug(
            "Phase %s complete (epoch %d, error %.6f)",
            phase.value,
            self._network.epoch,
            self._network.total_error,
        )
        self._emit_phase(entry)
        if phase is Phase.UPDATE:
            self._emit_epoch(self._network.epoch, {"loss": self._network.total_error})
        return entry

    def run_epochs(self, epochs: int) -> int:
        """Advance synchronously until ``epochs`` more updates have completed."""

        target = self._network.epoch + max(0, int(epochs))
        steps = 0
        while self._network.epoch < target:
            self.advance_phase()
            steps += 1
        return steps

    def set_architecture(self, input_count: int, hidden_layers: Sequence[int]) -> None:
        self._network.resize_architecture(input_count, hidden_layers, self._rng)
        self._phases.reset()

    def set_input(self, index: int, value: float) -> None:
        self._network.set_input(index, value)

    def set_target(self, value: float) -> None:
        self._network.set_target(value)

    def set_learning_rate(self, value: float) -> None:
        self._network.set_learning_rate(value)

    def set_weight(
        self, matrix_index: int, source_index: int, target_index: int, value: float
    ) -> None:
        self._network.set_weight(matrix_index, source_index, target_index, value)

    def set_bias(self, layer_index: int, index: int, value: float) -> None:
        self._network.set_bias(layer_index, index, value)

    def start_autoplay(self, epoch_limit: int | None = None) -> None:
        self._autoplay.start(epoch_limit)

    def stop_autoplay(self) -> None:
        self._autoplay.stop()

    def reset(self) -> None:
        """Zero progress and the log; keep architecture, parameters and settings."""

        self._autoplay.stop()
        self._network.reset()
        self._log.clear()
        self._phases.reset()
        logger.info("Engine reset (%s)", self._network.architecture)

    def clear_log(self) -> None:
        self._log.clear()

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_phase(self, entry: TrainingLogEntry) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_phase"):
                callback.on_phase(entry)  # type: ignore[attr-defined]
            elif callable(callback) and not hasattr(callback, "on_epoch"):
                callback(entry)

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]


__all__ = ["TrainingEngine"]
