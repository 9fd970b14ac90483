"""Genetic search over Yagi element layouts.

Each candidate layout is simulated through the supplied simulator one at a
time.  The external solver is not known to tolerate interleaved invocations,
so evaluation stays sequential even though the fitness evaluations are
independent; a re-entrant solver could turn :meth:`GeneticOptimizer._evaluate`
into a worker-pool map without touching the rest of the loop.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np

from openuda.core.schemas import (
    AntennaDescription,
    Element,
    ElementRole,
    Objective,
    OptimizerSettings,
    SimulationResult,
)
from openuda.optimize.fitness import calculate_fitness

logger = logging.getLogger(__name__)


class OptimizerState(str, Enum):
    idle = "idle"
    initializing = "initializing"
    evaluating = "evaluating"
    evolving = "evolving"
    done = "done"


class SimulatorLike(Protocol):
    async def simulate(self, description: AntennaDescription) -> SimulationResult: ...

    def release(self) -> None: ...


@dataclass
class Individual:
    elements: list[Element]
    fitness: float = 0.0
    result: SimulationResult | None = None


@dataclass
class GenerationSummary:
    generation: int
    best_fitness: float | None
    gain_dbi: float | None
    front_to_back_db: float | None
    vswr: float | None
    failures: int


class GeneticOptimizer:
    """Evolve a population of element layouts toward an objective.

    Parameters
    ----------
    simulator:
        Object with ``async simulate(description)`` and ``release()``.
    initial:
        Starting design.  Its frequency, ground and mount height are kept for
        every candidate; only element lengths and positions evolve.
    objective:
        Figure of merit; defaults to ``settings.objective``.
    settings:
        Population size, generation count, mutation parameters, etc.
    rng:
        Random source.  Defaults to ``numpy.random.default_rng(settings.seed)``.
    on_progress:
        Called with one human-readable line per milestone.
    should_stop:
        Polled at each generation boundary; when it returns true the best
        design found so far is returned.
    """

    def __init__(
        self,
        simulator: SimulatorLike,
        initial: AntennaDescription,
        objective: Objective | None = None,
        settings: OptimizerSettings | None = None,
        rng: np.random.Generator | None = None,
        on_progress: Callable[[str], None] | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        self.simulator = simulator
        self.initial = initial
        self.settings = settings or OptimizerSettings()
        self.objective = objective if objective is not None else self.settings.objective
        self.rng = rng if rng is not None else np.random.default_rng(self.settings.seed)
        self.on_progress = on_progress
        self.should_stop = should_stop

        self.state = OptimizerState.idle
        self.population: list[Individual] = []
        self.history: list[GenerationSummary] = []
        self.best_fitness: float = -math.inf
        self.best_result: SimulationResult | None = None

    # ── Driver ──

    async def run(self) -> list[Element]:
        """Run the search and return the best element layout found."""
        generations = self.settings.generations
        try:
            self.state = OptimizerState.initializing
            self._progress("Initializing population...")
            self._initialize()

            for gen in range(generations):
                self.state = OptimizerState.evaluating
                self._progress(f"--- Generation {gen + 1} / {generations} ---")
                await self._evaluate()
                self._select(gen)

                if gen == generations - 1:
                    break
                if self.should_stop is not None and self.should_stop():
                    self._progress("Stop requested; returning best design so far.")
                    break
                self.state = OptimizerState.evolving
                self._evolve()

            best = self.population[0]
            self.best_fitness = best.fitness
            self.best_result = best.result
            self._progress("Optimization finished.")
            if best.result is not None:
                self._progress(
                    f"Final best design found. Gain: {best.result.gain_dbi:.2f} dBi, "
                    f"F/B Ratio: {best.result.front_to_back_db:.2f} dB"
                )
            return list(best.elements)
        finally:
            self.population = []
            self.state = OptimizerState.done
            self.simulator.release()

    def _progress(self, message: str) -> None:
        logger.info(message)
        if self.on_progress is not None:
            self.on_progress(message)

    # ── Phases ──

    def _initialize(self) -> None:
        size = self.settings.population_size
        self.population = [Individual(elements=list(self.initial.elements))]
        for _ in range(1, size):
            elements = [self._perturb(el) for el in self.initial.elements]
            self.population.append(Individual(elements=elements))

    def _perturb(self, element: Element) -> Element:
        """Scale every free gene once by a factor in ``1 ± mutation_amount / 2``."""
        update = {"length_mm": element.length_mm * self._scale_factor()}
        if element.role is not ElementRole.driven:
            update["position_mm"] = element.position_mm * self._scale_factor()
        return element.model_copy(update=update)

    def _scale_factor(self) -> float:
        return 1.0 + (float(self.rng.random()) - 0.5) * self.settings.mutation_amount

    async def _evaluate(self) -> None:
        for index, individual in enumerate(self.population):
            candidate = self.initial.model_copy(update={"elements": individual.elements})
            try:
                result = await self.simulator.simulate(candidate)
            except Exception as e:
                logger.warning("Simulation failed for individual %d: %s", index, e)
                individual.result = None
                individual.fitness = -math.inf
                continue
            individual.result = result
            individual.fitness = calculate_fitness(result, self.objective, self.settings)

    def _select(self, generation: int) -> None:
        self.population.sort(key=lambda ind: ind.fitness, reverse=True)
        best = self.population[0]
        failures = sum(1 for ind in self.population if ind.fitness == -math.inf)

        if best.result is None:
            self.history.append(GenerationSummary(generation + 1, None, None, None, None, failures))
            self._progress("Best Fitness: -inf (no design in this generation simulated successfully)")
            return

        r = best.result
        self.history.append(
            GenerationSummary(
                generation + 1, best.fitness, r.gain_dbi, r.front_to_back_db, r.vswr, failures
            )
        )
        self._progress(
            f"Best Fitness: {best.fitness:.4f} (Gain: {r.gain_dbi:.2f} dBi, "
            f"F/B: {r.front_to_back_db:.2f} dB, VSWR: {r.vswr:.2f})"
        )

    def _evolve(self) -> None:
        size = self.settings.population_size
        elite_count = min(self.settings.elitism, size)

        next_population = [
            Individual(elements=list(ind.elements), fitness=ind.fitness, result=ind.result)
            for ind in self.population[:elite_count]
        ]
        while len(next_population) < size:
            parent1 = self._tournament()
            parent2 = self._tournament()
            child = self._crossover(parent1.elements, parent2.elements)
            next_population.append(Individual(elements=self._mutate(child)))

        self.population = next_population

    # ── Operators ──

    def _tournament(self) -> Individual:
        """Best of ``tournament_size`` uniform draws.

        Draws come from the individuals with finite fitness whenever there
        are any, so a failed simulation is never chosen as a parent while a
        working design exists.
        """
        pool = [ind for ind in self.population if math.isfinite(ind.fitness)] or self.population
        picks = self.rng.integers(0, len(pool), size=self.settings.tournament_size)
        best = pool[int(picks[0])]
        for idx in picks[1:]:
            contender = pool[int(idx)]
            if contender.fitness > best.fitness:
                best = contender
        return best

    def _crossover(self, parent1: list[Element], parent2: list[Element]) -> list[Element]:
        cut = int(self.rng.integers(0, len(parent1)))
        return list(parent1[:cut]) + list(parent2[cut:])

    def _mutate(self, elements: list[Element]) -> list[Element]:
        rate = self.settings.mutation_rate
        mutated: list[Element] = []
        for el in elements:
            update: dict[str, float] = {}
            if self.rng.random() < rate:
                update["length_mm"] = el.length_mm * self._scale_factor()
            # The driven element's position anchors the geometry.
            if el.role is not ElementRole.driven and self.rng.random() < rate:
                update["position_mm"] = el.position_mm * self._scale_factor()
            mutated.append(el.model_copy(update=update) if update else el)
        return mutated


async def optimize_design(
    simulator: SimulatorLike,
    initial: AntennaDescription,
    objective: Objective | None = None,
    settings: OptimizerSettings | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> list[Element]:
    """Convenience wrapper: build a :class:`GeneticOptimizer` and run it."""
    optimizer = GeneticOptimizer(
        simulator, initial, objective=objective, settings=settings, on_progress=on_progress
    )
    return await optimizer.run()
