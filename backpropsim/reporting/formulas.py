"""Reference formulas shown next to the training log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..core.types import Phase


@dataclass(frozen=True)
class Formula:
    title: str
    formula: str
    description: str
    phase: Phase


FORMULAS: Tuple[Formula, ...] = (
    Formula(
        "Net Input (Weighted Sum)",
        "net_j = Σ(wᵢⱼ · xᵢ) + bⱼ",
        "Each neuron sums its inputs multiplied by their weights, then adds a bias "
        "term. This is the value before the activation function is applied.",
        Phase.FORWARD,
    ),
    Formula(
        "Sigmoid Activation",
        "σ(x) = 1 / (1 + e⁻ˣ)",
        "The sigmoid squashes any real number into (0, 1) and gives the network "
        "its non-linearity.",
        Phase.FORWARD,
    ),
    Formula(
        "Sigmoid Derivative",
        "σ'(x) = σ(x) · (1 - σ(x))",
        "How much the activation changes for a small change in net input. "
        "It peaks at σ(x) = 0.5 and vanishes at the extremes.",
        Phase.BACKWARD,
    ),
    Formula(
        "Mean Squared Error (MSE)",
        "E = ½ · (target - output)²",
        "Distance between the output and the target for this sample. The ½ "
        "cancels when the derivative is taken.",
        Phase.ERROR,
    ),
    Formula(
        "Output Layer Gradient",
        "δₒ = (output - target) · σ'(output)",
        "The error signal at the output neuron scaled by the local slope of the "
        "sigmoid.",
        Phase.BACKWARD,
    ),
    Formula(
        "Hidden Layer Gradient",
        "δₕ = (Σ δₖ · wₕₖ) · σ'(hₕ)",
        "Gradients of the following layer are sent back through the connecting "
        "weights and scaled by the hidden neuron's sigmoid slope.",
        Phase.BACKWARD,
    ),
    Formula(
        "Weight Update Rule",
        "wᵢⱼ ← wᵢⱼ - η · δⱼ · aᵢ",
        "Each weight moves against its gradient: learning rate times the target "
        "neuron's gradient times the source neuron's activation.",
        Phase.UPDATE,
    ),
    Formula(
        "Bias Update Rule",
        "bⱼ ← bⱼ - η · δⱼ",
        "Biases follow the same rule without the activation term, as if wired to "
        "a constant input of 1.",
        Phase.UPDATE,
    ),
)


def formulas_for(phase: Phase) -> Tuple[Formula, ...]:
    return tuple(f for f in FORMULAS if f.phase is Phase(phase))


__all__ = ["FORMULAS", "Formula", "formulas_for"]
