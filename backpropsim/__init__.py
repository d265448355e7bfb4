"""backpropsim public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.network import Network, default_network
from .core.types import ALL, Phase
from .training.autoplay import AsyncioScheduler, ManualScheduler
from .training.engine import TrainingEngine
from .training.log import TrainingLog, TrainingLogEntry
from .training.presets import build_engine, load_preset, presets

__all__ = [
    "ALL",
    "AsyncioScheduler",
    "ManualScheduler",
    "Network",
    "Phase",
    "TrainingEngine",
    "TrainingLog",
    "TrainingLogEntry",
    "activations",
    "build_engine",
    "default_network",
    "load_preset",
    "presets",
    "types",
]
