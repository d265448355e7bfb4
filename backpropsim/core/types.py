"""Core typing contracts for backpropsim."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

import numpy as np

Array = np.ndarray


class Phase(str, Enum):
    """Label of the most recently completed training phase."""

    IDLE = "IDLE"
    FORWARD = "FORWARD"
    ERROR = "ERROR"
    BACKWARD = "BACKWARD"
    UPDATE = "UPDATE"


ALL = "ALL"

PhaseFilter = Union[Phase, Literal["ALL"]]

LayerKind = Literal["input", "hidden", "output"]


@dataclass(frozen=True)
class NeuronDetails:
    """Values shown by the neuron inspector."""

    layer: LayerKind
    index: int
    value: float
    hidden_layer_index: Optional[int] = None
    net_input: Optional[float] = None
    gradient: Optional[float] = None
    bias: Optional[float] = None

    @property
    def id(self) -> str:
        if self.layer == "hidden":
            return f"hidden-{self.hidden_layer_index}-{self.index}"
        return f"{self.layer}-{self.index}"


@dataclass(frozen=True)
class WeightDetails:
    """A single connection as addressed by ``set_weight``."""

    matrix_index: int
    source_index: int
    target_index: int
    source_layer: LayerKind
    target_layer: LayerKind
    value: float

    @property
    def id(self) -> str:
        return f"w-{self.matrix_index}-{self.source_index}-{self.target_index}"


__all__ = [
    "ALL",
    "Array",
    "LayerKind",
    "NeuronDetails",
    "Phase",
    "PhaseFilter",
    "WeightDetails",
]
