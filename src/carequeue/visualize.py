"""
Forecast chart for quick inspection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib

# Use a non-interactive backend to avoid display issues in headless environments.
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .forecasting import to_frame  # noqa: E402
from .models import LoadPrediction  # noqa: E402

RISK_COLORS = {
    "low": "tab:green",
    "normal": "tab:blue",
    "high": "gold",
    "critical": "tab:red",
}


def plot_forecast(predictions: Sequence[LoadPrediction], outfile: Optional[Path] = None) -> None:
    df = to_frame(predictions)
    fig, ax = plt.subplots(figsize=(10, 4))

    labels = [f"{row.day}\n{row.date:%m-%d}" for row in df.itertuples()]
    colors = [RISK_COLORS[r] for r in df["risk"]]
    ax.bar(labels, df["expected"], color=colors)
    ax.set_title(f"{len(df)}-day patient load forecast")
    ax.set_ylabel("Expected patients")

    plt.tight_layout()
    if outfile:
        plt.savefig(outfile, dpi=150)
    else:
        plt.show()
    plt.close(fig)
