"""Variable-size feed-forward network state for the backprop simulator."""

from __future__ import annotations

import copy
import logging
import operator
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from .activations import random_weight
from .types import Array

logger = logging.getLogger(__name__)

MIN_NEURONS = 1
MAX_NEURONS = 5
MAX_INPUTS = 5
MIN_HIDDEN_LAYERS = 1
MAX_HIDDEN_LAYERS = 4

DEFAULT_INPUT_VALUE = 0.1
DEFAULT_TARGET = 0.1
DEFAULT_LEARNING_RATE = 0.2

DEFAULT_WEIGHTS = (
    [[0.6, -0.1], [-0.3, 0.4]],
    [[0.4], [-0.5]],
)
DEFAULT_BIASES = ([0.3, -0.2], [-0.1])


def in_bounds(index, size: int) -> bool:
    """Return ``True`` when ``index`` is an integer in ``[0, size)``."""

    try:
        idx = operator.index(index)
    except TypeError:
        return False
    return 0 <= idx < size


def _clamp(value, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


def clamp_architecture(input_count, hidden_layers: Sequence) -> tuple[int, List[int]]:
    """Clamp an architecture request into the supported range."""

    inputs = _clamp(input_count, MIN_NEURONS, MAX_INPUTS)
    hidden = [_clamp(size, MIN_NEURONS, MAX_NEURONS) for size in hidden_layers]
    hidden = hidden[:MAX_HIDDEN_LAYERS] or [MIN_NEURONS] * MIN_HIDDEN_LAYERS
    return inputs, hidden


def _as_matrix(values, shape: tuple, name: str) -> Array:
    arr = np.array(values, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {arr.shape}")
    return arr


@dataclass(eq=False)
class Network:
    """Weights, biases, inputs and per-phase values of one network.

    ``weights[m][s, t]`` connects neuron ``s`` of layer ``m`` to neuron ``t`` of
    layer ``m + 1``; ``biases[m][t]`` belongs to neuron ``t`` of layer ``m + 1``.
    Computed vectors are zero until the corresponding pass has run.
    """

    input_count: int
    hidden_layers: List[int]
    weights: List[Array]
    biases: List[Array]
    inputs: Array
    target: float = DEFAULT_TARGET
    learning_rate: float = DEFAULT_LEARNING_RATE
    output_count: int = 1
    hidden_net_inputs: List[Array] = field(init=False, repr=False)
    hidden_activations: List[Array] = field(init=False, repr=False)
    output_net_inputs: Array = field(init=False, repr=False)
    output_activations: Array = field(init=False, repr=False)
    output_gradients: Array = field(init=False, repr=False)
    hidden_gradients: List[Array] = field(init=False, repr=False)
    raw_errors: Array = field(init=False, repr=False)
    output_errors: Array = field(init=False, repr=False)
    epoch: int = field(init=False, default=0)
    total_error: float = field(init=False, default=0.0)
    raw_error: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.hidden_layers = [int(size) for size in self.hidden_layers]
        sizes = self.layer_sizes
        if len(self.weights) != len(sizes) - 1 or len(self.biases) != len(sizes) - 1:
            raise ValueError(
                f"expected {len(sizes) - 1} weight matrices and bias vectors "
                f"for layer sizes {sizes}"
            )
        self.weights = [
            _as_matrix(W, (rows, cols), f"weights[{idx}]")
            for idx, (W, rows, cols) in enumerate(zip(self.weights, sizes[:-1], sizes[1:]))
        ]
        self.biases = [
            _as_matrix(b, (cols,), f"biases[{idx}]")
            for idx, (b, cols) in enumerate(zip(self.biases, sizes[1:]))
        ]
        self.inputs = _as_matrix(self.inputs, (self.input_count,), "inputs")
        self.target = float(self.target)
        self.learning_rate = float(self.learning_rate)
        self.reset()

    # ------------------------------------------------------------------
    # Construction

    @classmethod
    def build(
        cls,
        input_count: int,
        hidden_layers: Sequence[int],
        rng: np.random.Generator,
        *,
        output_count: int = 1,
        inputs: Sequence[float] | None = None,
        target: float = DEFAULT_TARGET,
        learning_rate: float = DEFAULT_LEARNING_RATE,
    ) -> "Network":
        """Create a network with random weights and biases in ``[-1, 1)``."""

        input_count, hidden = clamp_architecture(input_count, hidden_layers)
        sizes = [input_count, *hidden, output_count]
        weights = [random_weight(rng, (rows, cols)) for rows, cols in zip(sizes[:-1], sizes[1:])]
        biases = [random_weight(rng, cols) for cols in sizes[1:]]
        if inputs is None:
            inputs = [DEFAULT_INPUT_VALUE] * input_count
        return cls(
            input_count=input_count,
            hidden_layers=hidden,
            weights=weights,
            biases=biases,
            inputs=inputs,
            target=target,
            learning_rate=learning_rate,
            output_count=output_count,
        )

    # ------------------------------------------------------------------
    # Derived views

    @property
    def layer_sizes(self) -> List[int]:
        return [self.input_count, *self.hidden_layers, self.output_count]

    @property
    def targets(self) -> Array:
        """Target vector; outputs beyond the first are trained towards 0."""

        out = np.zeros(self.output_count, dtype=np.float64)
        out[0] = self.target
        return out

    @property
    def architecture(self) -> str:
        return " → ".join(str(size) for size in self.layer_sizes)

    def parameter_count(self) -> int:
        return int(sum(W.size for W in self.weights) + sum(b.size for b in self.biases))

    def copy(self) -> "Network":
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Lifecycle

    def clear_computed(self) -> None:
        """Zero every net input, activation and gradient vector."""

        self.hidden_net_inputs = [np.zeros(size) for size in self.hidden_layers]
        self.hidden_activations = [np.zeros(size) for size in self.hidden_layers]
        self.hidden_gradients = [np.zeros(size) for size in self.hidden_layers]
        self.output_net_inputs = np.zeros(self.output_count)
        self.output_activations = np.zeros(self.output_count)
        self.output_gradients = np.zeros(self.output_count)

    def reset(self) -> None:
        """Forget training progress but keep weights, biases and settings."""

        self.clear_computed()
        self.raw_errors = np.zeros(self.output_count)
        self.output_errors = np.zeros(self.output_count)
        self.epoch = 0
        self.total_error = 0.0
        self.raw_error = 0.0

    def resize_architecture(
        self, input_count, hidden_layers: Sequence, rng: np.random.Generator
    ) -> "Network":
        """Resize in place, keeping every weight and bias whose index survives.

        Positions that did not exist before are drawn uniformly from ``[-1, 1)``.
        Computed vectors are zeroed; epoch, errors, target and learning rate
        are left alone.
        """

        input_count, hidden = clamp_architecture(input_count, hidden_layers)
        sizes = [input_count, *hidden, self.output_count]

        weights: List[Array] = []
        biases: List[Array] = []
        for idx, (rows, cols) in enumerate(zip(sizes[:-1], sizes[1:])):
            W = random_weight(rng, (rows, cols))
            b = random_weight(rng, cols)
            if idx < len(self.weights):
                old_W = self.weights[idx]
                keep_r = min(rows, old_W.shape[0])
                keep_c = min(cols, old_W.shape[1])
                W[:keep_r, :keep_c] = old_W[:keep_r, :keep_c]
                old_b = self.biases[idx]
                keep_b = min(cols, old_b.shape[0])
                b[:keep_b] = old_b[:keep_b]
            weights.append(W)
            biases.append(b)

        inputs = np.full(input_count, DEFAULT_INPUT_VALUE, dtype=np.float64)
        keep = min(input_count, self.inputs.shape[0])
        inputs[:keep] = self.inputs[:keep]

        logger.info("Resized network %s -> %s", self.architecture, " → ".join(map(str, sizes)))
        self.input_count = input_count
        self.hidden_layers = hidden
        self.weights = weights
        self.biases = biases
        self.inputs = inputs
        self.clear_computed()
        return self

    # ------------------------------------------------------------------
    # Direct edits. Stale indices are ignored.

    def set_input(self, index, value: float) -> None:
        if not in_bounds(index, self.input_count):
            return
        self.inputs[index] = float(value)

    def set_target(self, value: float) -> None:
        self.target = float(value)

    def set_learning_rate(self, value: float) -> None:
        self.learning_rate = float(value)

    def set_weight(self, matrix_index, source_index, target_index, value: float) -> None:
        if not in_bounds(matrix_index, len(self.weights)):
            return
        W = self.weights[matrix_index]
        if not (in_bounds(source_index, W.shape[0]) and in_bounds(target_index, W.shape[1])):
            return
        W[source_index, target_index] = float(value)

    def set_bias(self, layer_index, index, value: float) -> None:
        if not in_bounds(layer_index, len(self.biases)):
            return
        b = self.biases[layer_index]
        if not in_bounds(index, b.shape[0]):
            return
        b[index] = float(value)


def default_network() -> Network:
    """The reproducible 2-2-1 starting scenario."""

    return Network(
        input_count=2,
        hidden_layers=[2],
        weights=[np.array(W) for W in DEFAULT_WEIGHTS],
        biases=[np.array(b) for b in DEFAULT_BIASES],
        inputs=[DEFAULT_INPUT_VALUE, DEFAULT_INPUT_VALUE],
        target=DEFAULT_TARGET,
        learning_rate=DEFAULT_LEARNING_RATE,
    )


__all__ = [
    "DEFAULT_INPUT_VALUE",
    "DEFAULT_LEARNING_RATE",
    "DEFAULT_TARGET",
    "MAX_HIDDEN_LAYERS",
    "MAX_INPUTS",
    "MAX_NEURONS",
    "Network",
    "clamp_architecture",
    "default_network",
    "in_bounds",
]
