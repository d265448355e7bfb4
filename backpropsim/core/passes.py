"""The four training passes: forward, error, backward and update.

Each pass reads the current :class:`~backpropsim.core.network.Network`,
assigns the fields it computes and returns the same network.
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np

from .losses import loss_gradient, output_error
from .activations import sigmoid, sigmoid_derivative_from_activation
from .network import Network
from .types import Array

Gradients = Dict[str, Array]


def _layer_forward(source: Array, W: Array, b: Array) -> tuple[Array, Array]:
    net = b + source @ W
    return net, sigmoid(net)


def forward_pass(network: Network) -> Network:
    """Propagate ``inputs`` through every hidden layer and the output layer."""

    source = network.inputs
    last = len(network.weights) - 1
    net_inputs: List[Array] = []
    activations: List[Array] = []
    for idx in range(last):
        net, act = _layer_forward(source, network.weights[idx], network.biases[idx])
        net_inputs.append(net)
        activations.append(act)
        source = act
    out_net, out_act = _layer_forward(source, network.weights[last], network.biases[last])

    network.hidden_net_inputs = net_inputs
    network.hidden_activations = activations
    network.output_net_inputs = out_net
    network.output_activations = out_act
    return network


def error_pass(network: Network) -> Network:
    """Compute ``target - output`` and ``0.5 * (target - output) ** 2``."""

    terms = output_error(network.output_activations, network.targets)
    network.raw_errors = terms.raw
    network.output_errors = terms.loss
    network.raw_error = float(terms.raw[0])
    network.total_error = terms.total
    return network


def backward_pass(network: Network) -> Network:
    """Compute the output gradient and walk it back through the hidden layers."""

    outputs = network.output_activations
    delta = loss_gradient(outputs, network.targets) * sigmoid_derivative_from_activation(
        outputs
    )
    network.output_gradients = delta

    hidden_gradients: List[Array] = [np.zeros(0)] * len(network.hidden_layers)
    for idx in reversed(range(len(network.hidden_layers))):
        forward = network.weights[idx + 1]
        delta = (forward @ delta) * sigmoid_derivative_from_activation(
            network.hidden_activations[idx]
        )
        hidden_gradients[idx] = delta
    network.hidden_gradients = hidden_gradients
    return network


def parameter_gradients(network: Network) -> Gradients:
    """dE/dW and dE/db for every layer, keyed ``W{m}`` and ``b{m}``."""

    deltas = [*network.hidden_gradients, network.output_gradients]
    sources = [network.inputs, *network.hidden_activations]
    grads: Gradients = {}
    for idx, (source, delta) in enumerate(zip(sources, deltas)):
        grads[f"W{idx}"] = np.outer(source, delta)
        grads[f"b{idx}"] = np.array(delta, dtype=np.float64)
    return grads


def update_pass(network: Network) -> Network:
    """Gradient-descent step on every weight and bias, then count the epoch."""

    lr = network.learning_rate
    grads = parameter_gradients(network)
    network.weights = [W - lr * grads[f"W{idx}"] for idx, W in enumerate(network.weights)]
    network.biases = [b - lr * grads[f"b{idx}"] for idx, b in enumerate(network.biases)]
    network.epoch += 1
    return network


__all__ = [
    "Gradients",
    "backward_pass",
    "error_pass",
    "forward_pass",
    "parameter_gradients",
    "update_pass",
]
