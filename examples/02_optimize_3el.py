#!/usr/bin/env python3
"""Example 02: Optimize a 3-element FM Yagi for front-to-back ratio.

Runs a short, seeded genetic search and compares the optimized layout with
the starting one.  Requires the ``nec2c`` executable on PATH.
"""

import asyncio

from openuda.core.schemas import Objective, OptimizerSettings
from openuda.nec.session import get_session
from openuda.optimize import GeneticOptimizer
from openuda.presets import get_preset_by_id
from openuda.simulation import Simulator

initial = get_preset_by_id("fm-broadcast-3el").to_description()

settings = OptimizerSettings(
    objective=Objective.fb_ratio,
    population_size=16,
    generations=8,
    seed=2024,
)

optimizer = GeneticOptimizer(
    Simulator(get_session()),
    initial,
    settings=settings,
    on_progress=print,
)
best_elements = asyncio.run(optimizer.run())

print("\n--- Element layout (mm) ---")
print(f"{'role':<10} {'pos before':>11} {'pos after':>10} {'len before':>11} {'len after':>10}")
for before, after in zip(initial.elements, best_elements):
    print(
        f"{before.role.value:<10} {before.position_mm:11.1f} {after.position_mm:10.1f} "
        f"{before.length_mm:11.1f} {after.length_mm:10.1f}"
    )

if optimizer.best_result is not None:
    r = optimizer.best_result
    print(f"\nBest: {r.gain_dbi:.2f} dBi, F/B {r.front_to_back_db:.2f} dB, VSWR {r.vswr:.2f}")
