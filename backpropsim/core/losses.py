"""Per-sample squared error used by the error and backward passes."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Array


def mse(target, output):
    """Return ``0.5 * (target - output) ** 2``.

    Despite the name this is a per-sample loss with the conventional one half
    factor, not a mean over samples. Works element-wise on arrays.
    """

    diff = np.asarray(target, dtype=np.float64) - np.asarray(output, dtype=np.float64)
    value = 0.5 * np.square(diff)
    if np.ndim(value) == 0:
        return float(value)
    return value


@dataclass(frozen=True)
class ErrorTerms:
    """Per-output error values produced by :func:`output_error`."""

    raw: Array
    loss: Array

    @property
    def total(self) -> float:
        return float(np.sum(self.loss))


def output_error(outputs: Array, targets: Array) -> ErrorTerms:
    """Raw error ``target - output`` and half squared error per output."""

    outputs = np.asarray(outputs, dtype=np.float64)
    targets = np.asarray(targets, dtype=np.float64)
    return ErrorTerms(raw=targets - outputs, loss=mse(targets, outputs))


def loss_gradient(outputs: Array, targets: Array) -> Array:
    """dE/d(output) for the half squared error, i.e. ``output - target``."""

    return np.asarray(outputs, dtype=np.float64) - np.asarray(targets, dtype=np.float64)


__all__ = ["ErrorTerms", "loss_gradient", "mse", "output_error"]
