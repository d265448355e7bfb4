"""Activation utilities for backpropsim."""

from __future__ import annotations

import numpy as np

from .types import Array

WEIGHT_RANGE = (-1.0, 1.0)


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid of ``x``."""

    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=np.float64)))


def sigmoid_derivative(x: Array) -> Array:
    """Derivative of the sigmoid with respect to its net input ``x``."""

    sx = sigmoid(x)
    return sx * (1.0 - sx)


def sigmoid_derivative_from_activation(activation: Array) -> Array:
    """Derivative of the sigmoid expressed through ``activation = sigmoid(z)``."""

    a = np.asarray(activation, dtype=np.float64)
    return a * (1.0 - a)


def random_weight(rng: np.random.Generator, size=None) -> Array:
    """Draw weights uniformly from ``[-1, 1)``."""

    low, high = WEIGHT_RANGE
    return rng.uniform(low, high, size=size)


def format_number(value: float) -> float:
    """Round ``value`` to four decimals for display."""

    return round(float(value), 4)
