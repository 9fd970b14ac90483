"""Genetic design optimizer."""

from openuda.optimize.fitness import calculate_fitness
from openuda.optimize.genetic import GeneticOptimizer, Individual, OptimizerState, optimize_design

__all__ = [
    "GeneticOptimizer",
    "Individual",
    "OptimizerState",
    "calculate_fitness",
    "optimize_design",
]
