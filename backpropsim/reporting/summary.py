"""Deterministic summaries of the training log and the live network."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

import numpy as np

from ..core.activations import format_number
from ..core.network import Network
from ..core.types import Phase
from ..training.log import TrainingLogEntry


def _area(y: np.ndarray, x: np.ndarray) -> float:
    trapezoid = getattr(np, "trapezoid", None)
    if callable(trapezoid):
        return float(trapezoid(y, x))
    return float(np.trapz(y, x))


def compute_auc(points: Sequence[float]) -> float:
    """Return the area-under-curve of ``points`` along an implicit step axis."""

    if not points:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    x = np.arange(len(points), dtype=np.float64)
    return _area(y, x)


def summarize_log(entries: Iterable[TrainingLogEntry], *, tail: int = 32) -> Mapping[str, object]:
    """Statistics of ``total_error`` as recorded by the ERROR phases."""

    records = list(entries)
    errors = [entry.total_error for entry in records if entry.phase is Phase.ERROR]
    tail_window = min(tail, len(errors)) if errors else 0

    stats: Mapping[str, float] = {}
    if errors:
        arr = np.asarray(errors, dtype=np.float64)
        tail_arr = arr[-tail_window:]
        stats = {
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "first": float(arr[0]),
            "last": float(arr[-1]),
            "tail_auc": compute_auc(tail_arr.tolist()),
        }

    phases = {phase.value: 0 for phase in Phase}
    for entry in records:
        phases[entry.phase.value] += 1

    return {
        "version": 1,
        "records": len(records),
        "last_epoch": records[-1].epoch if records else 0,
        "phases": phases,
        "tail_window": tail_window,
        "total_error": stats,
    }


def network_summary(network: Network) -> Mapping[str, object]:
    """The values shown in the "current network state" panel."""

    return {
        "architecture": network.architecture,
        "epoch": network.epoch,
        "learning_rate": network.learning_rate,
        "total_error": format_number(network.total_error),
        "inputs": [format_number(v) for v in network.inputs],
        "target": format_number(network.target),
        "parameters": network.parameter_count(),
    }


__all__ = ["compute_auc", "network_summary", "summarize_log"]
