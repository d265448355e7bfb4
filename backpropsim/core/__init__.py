"""Core numerical primitives for backpropsim."""

from . import activations, losses, network, passes, phases, types

__all__ = ["activations", "losses", "network", "passes", "phases", "types"]
