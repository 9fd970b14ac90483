"""Polar plots of decoded radiation patterns."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from openuda.core.schemas import PatternSample, SimulationResult

logger = logging.getLogger(__name__)

# Gains below this are drawn at the plot floor (NEC prints -999.99 for nulls).
PLOT_FLOOR_DB = -40.0


def _polar_arrays(samples: list[PatternSample], floor_db: float) -> tuple[np.ndarray, np.ndarray]:
    angles = np.deg2rad([s.angle_deg for s in samples])
    gains = np.maximum(np.array([s.gain_db for s in samples], dtype=float), floor_db)
    return angles, gains


def plot_patterns(
    result: SimulationResult,
    output_path: str | Path,
    title: str | None = None,
    floor_db: float = PLOT_FLOOR_DB,
) -> Path:
    """Save azimuth and elevation cuts of *result* side by side as a PNG."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, axes = plt.subplots(1, 2, figsize=(12, 5.5), subplot_kw={"projection": "polar"})
    cuts = [
        (axes[0], result.horizontal_pattern, "Azimuth (horizontal)"),
        (axes[1], result.vertical_pattern, "Elevation (vertical)"),
    ]
    for ax, samples, label in cuts:
        ax.set_title(label)
        ax.set_theta_zero_location("N")
        ax.set_theta_direction(-1)
        ax.grid(True)
        if not samples:
            ax.text(0.5, 0.5, "no data", transform=ax.transAxes, ha="center", va="center")
            continue
        theta, gain = _polar_arrays(samples, floor_db)
        ax.plot(theta, gain)
        ax.set_rlim(floor_db, max(float(gain.max()), floor_db + 1.0) + 2.0)

    if title is None:
        title = (
            f"{result.frequency_mhz:g} MHz: {result.gain_dbi:.2f} dBi, "
            f"F/B {result.front_to_back_db:.2f} dB, VSWR {result.vswr:.2f}"
        )
    fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    logger.info("Pattern plot written to %s", output_path)
    return output_path


def plot_fitness_history(
    best_fitness: list[float | None],
    output_path: str | Path,
) -> Path:
    """Save the best fitness per generation as a line plot."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    generations = np.arange(1, len(best_fitness) + 1)
    values = np.array([np.nan if v is None else v for v in best_fitness], dtype=float)

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(generations, values, marker="o")
    ax.set_xlabel("Generation")
    ax.set_ylabel("Best fitness")
    ax.set_title("Optimization progress")
    ax.grid(True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
