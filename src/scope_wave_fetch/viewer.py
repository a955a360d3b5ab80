from __future__ import annotations

import matplotlib.pyplot as plt

from .stats import summarize
from .types import AcquisitionResult


class Viewer:
    """Zeigt alle Kanäle einer Erfassung über der gemeinsamen Zeitachse."""

    def __init__(self, result: AcquisitionResult) -> None:
        self.result = result
        self.grid = True

        self.fig, self.ax = plt.subplots()
        self.fig.canvas.mpl_connect("key_press_event", self.on_key)
        self._draw()

    def on_key(self, event) -> None:
        k = (event.key or "").lower()
        if k == "g":
            self.grid = not self.grid
            self.ax.grid(self.grid)
            self.fig.canvas.draw()
        elif k in ("q", "escape"):
            plt.close(self.fig)

    def _draw(self) -> None:
        ax = self.ax
        ax.clear()
        t = self.result.time_axis()
        for wf in self.result.channels:
            ax.plot(t, wf.samples, label=f"{wf.name} [{wf.units}]")

        ax.set_title(self.result.instrument_id or "Waveform")
        ax.set_xlabel("Zeit [s]")
        ax.set_ylabel("Wert")
        ax.grid(self.grid)
        ax.legend(loc="upper right")
        ax.text(
            0.02,
            0.95,
            "\n".join(f"{wf.name}: {summarize(wf.samples)}" for wf in self.result.channels),
            transform=ax.transAxes,
            ha="left",
            va="top",
            fontsize="small",
        )

    def save(self, path) -> None:
        self.fig.savefig(path, dpi=150)
