#!/usr/bin/env python3
"""Example 01: Simulate a preset Yagi with nec2c.

This example demonstrates the minimal OpenUda workflow:
1. Pick a built-in design
2. Print the NEC-2 deck it encodes to
3. Run the solver and decode the report
4. Save the pattern cuts as a PNG

Requires the ``nec2c`` executable on PATH.
"""

import asyncio

from openuda.nec.encoder import encode
from openuda.presets import get_preset_by_id
from openuda.report.plots import plot_patterns
from openuda.simulation import simulate

# ── Design ────────────────────────────────────────────────────────────
preset = get_preset_by_id("2m-amateur-5el")
description = preset.to_description()

print("=" * 50)
print(f"OpenUda Example 01: {preset.name}")
print("=" * 50)
print(encode(description))

# ── Simulation ────────────────────────────────────────────────────────
result = asyncio.run(simulate(description))

z = result.input_impedance
print(f"Gain:              {result.gain_dbi:.2f} dBi")
print(f"F/B ratio:         {result.front_to_back_db:.2f} dB")
print(f"Impedance:         {z.resistance_ohm:.1f} {z.reactance_ohm:+.1f}j ohm")
print(f"VSWR (50 ohm):     {result.vswr:.2f}")
print(f"Efficiency:        {result.efficiency_percent:.1f}%")
for warning in result.warnings:
    print(f"warning: {warning}")

out = plot_patterns(result, "example_01_patterns.png")
print(f"\nPattern plot saved to {out}")
