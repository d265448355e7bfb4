"""Named scenarios and the config-to-engine assembly step."""

from __future__ import annotations

from copy import deepcopy
from typing import Callable, Dict, Mapping, Sequence

import numpy as np

from ..core.network import (
    DEFAULT_BIASES,
    DEFAULT_LEARNING_RATE,
    DEFAULT_TARGET,
    DEFAULT_WEIGHTS,
    Network,
    clamp_architecture,
)
from .autoplay import DEFAULT_INTERVAL, Scheduler
from .engine import TrainingEngine
from .log import DEFAULT_CAPACITY

_PRESETS: Dict[str, Mapping[str, object]] = {
    "default": {
        "network": {
            "inputs": [0.1, 0.1],
            "hidden_layers": [2],
            "target": DEFAULT_TARGET,
            "learning_rate": DEFAULT_LEARNING_RATE,
            "weights": [list(map(list, W)) for W in DEFAULT_WEIGHTS],
            "biases": [list(b) for b in DEFAULT_BIASES],
            "seed": 0,
        },
        "train": {"interval": DEFAULT_INTERVAL, "log_capacity": DEFAULT_CAPACITY},
    },
    "wide": {
        "network": {
            "inputs": [0.1, 0.9, 0.5, 0.3, 0.7],
            "hidden_layers": [5],
            "target": 0.8,
            "learning_rate": 0.5,
            "seed": 1,
        },
        "train": {"interval": DEFAULT_INTERVAL, "log_capacity": DEFAULT_CAPACITY},
    },
    "deep": {
        "network": {
            "inputs": [0.2, 0.6, 0.9],
            "hidden_layers": [4, 3],
            "target": 0.3,
            "learning_rate": 0.5,
            "seed": 2,
        },
        "train": {"interval": DEFAULT_INTERVAL, "log_capacity": DEFAULT_CAPACITY},
    },
    "deepest": {
        "network": {
            "inputs": [0.1, 0.2, 0.3, 0.4, 0.5],
            "hidden_layers": [5, 5, 5, 5],
            "target": 0.9,
            "learning_rate": 0.8,
            "seed": 3,
        },
        "train": {"interval": 0.5, "log_capacity": DEFAULT_CAPACITY},
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def build_network(config: Mapping[str, object]) -> Network:
    """Create a :class:`Network` from the ``network`` section of a config."""

    inputs = [float(v) for v in config.get("inputs", [0.1, 0.1])]  # type: ignore[union-attr]
    hidden: Sequence[int] = config.get("hidden_layers", [2])  # type: ignore[assignment]
    input_count, hidden_layers = clamp_architecture(len(inputs), hidden)
    if input_count != len(inputs) or list(hidden_layers) != [int(h) for h in hidden]:
        raise ValueError(
            f"Unsupported architecture {len(inputs)} -> {list(hidden)}: "
            "use 1-5 inputs and 1-4 hidden layers of 1-5 neurons"
        )

    rng = np.random.default_rng(int(config.get("seed", 0)))  # type: ignore[arg-type]
    network = Network.build(
        input_count,
        hidden_layers,
        rng,
        inputs=inputs,
        target=float(config.get("target", DEFAULT_TARGET)),  # type: ignore[arg-type]
        learning_rate=float(
            config.get("learning_rate", DEFAULT_LEARNING_RATE)  # type: ignore[arg-type]
        ),
    )
    weights = config.get("weights")
    biases = config.get("biases")
    if weights is not None or biases is not None:
        network = Network(
            input_count=network.input_count,
            hidden_layers=network.hidden_layers,
            weights=weights if weights is not None else network.weights,  # type: ignore[arg-type]
            biases=biases if biases is not None else network.biases,  # type: ignore[arg-type]
            inputs=network.inputs,
            target=network.target,
            learning_rate=network.learning_rate,
        )
    return network


def build_engine(
    config: Mapping[str, object],
    *,
    scheduler: Scheduler | None = None,
    callbacks: Sequence[object] | None = None,
    clock: Callable[[], float] | None = None,
) -> TrainingEngine:
    """Assemble a :class:`TrainingEngine` for ``config``."""

    if "network" not in config:
        raise KeyError("config is missing the 'network' section")
    net_cfg: Mapping[str, object] = config["network"]  # type: ignore[assignment]
    train_cfg: Mapping[str, object] = config.get("train", {})  # type: ignore[assignment]
    kwargs = {}
    if clock is not None:
        kwargs["clock"] = clock
    return TrainingEngine(
        build_network(net_cfg),
        scheduler=scheduler,
        interval=float(train_cfg.get("interval", DEFAULT_INTERVAL)),  # type: ignore[arg-type]
        log_capacity=int(train_cfg.get("log_capacity", DEFAULT_CAPACITY)),  # type: ignore[arg-type]
        seed=int(net_cfg.get("seed", 0)),  # type: ignore[arg-type]
        callbacks=callbacks,
        **kwargs,
    )


__all__ = ["build_engine", "build_network", "load_preset", "presets"]
