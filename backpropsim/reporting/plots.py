"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple


class ErrorCurvePlot:
    """Collect the error after each update and optionally emit a matplotlib figure."""

    def __init__(self, path: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.path = Path(path)
        self._history: List[Tuple[int, float]] = []

    @property
    def history(self) -> List[Tuple[int, float]]:
        return list(self._history)

    def on_epoch(self, epoch: int, metrics):
        self._history.append((int(epoch), float(metrics.get("loss", 0.0))))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        self.path.parent.mkdir(parents=True, exist_ok=True)
        epochs, losses = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(epochs, losses)
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Total error")
        ax.set_title("Training Curve")
        fig.savefig(self.path)
        plt.close(fig)
        return self.path
