"""Objective functions for the design optimizer."""

from __future__ import annotations

from openuda.core.schemas import Objective, OptimizerSettings, SimulationResult

BALANCED_GAIN_WEIGHT = 0.6
BALANCED_FB_WEIGHT = 0.4


def objective_value(result: SimulationResult, objective: Objective) -> float:
    """Raw figure of merit for *objective*, before any matching penalty."""
    if objective is Objective.gain:
        return result.gain_dbi
    if objective is Objective.fb_ratio:
        return result.front_to_back_db
    if objective is Objective.balanced:
        return BALANCED_GAIN_WEIGHT * result.gain_dbi + BALANCED_FB_WEIGHT * result.front_to_back_db
    raise ValueError(f"Unknown objective: {objective!r}")


def vswr_penalty_factor(vswr: float, threshold: float = 3.0, slope: float = 2.0) -> float:
    """Multiplier in (0, 1] that softly suppresses designs above *threshold*."""
    if vswr <= threshold:
        return 1.0
    return 1.0 / (1.0 + slope * (vswr - threshold))


def calculate_fitness(
    result: SimulationResult,
    objective: Objective,
    settings: OptimizerSettings | None = None,
) -> float:
    """Fitness of one simulated design.

    The objective value is scaled by :func:`vswr_penalty_factor`, so badly
    matched designs still compete but rank lower.
    """
    settings = settings or OptimizerSettings()
    fitness = objective_value(result, objective)
    return fitness * vswr_penalty_factor(result.vswr, settings.vswr_threshold, settings.vswr_penalty)
