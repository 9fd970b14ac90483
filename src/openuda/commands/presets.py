"""openuda presets command: list the built-in designs."""

from __future__ import annotations

import argparse


def cmd_presets(args: argparse.Namespace) -> None:
    """Print the preset catalogue, or the elements of one preset."""
    from openuda.presets import ANTENNA_PRESETS, get_preset_by_id, get_presets_by_category

    if args.id:
        preset = get_preset_by_id(args.id)
        if preset is None:
            print(f"[openuda presets] Unknown preset: {args.id}")
            return
        print(f"{preset.name} ({preset.frequency_mhz:g} MHz) — {preset.description}")
        for i, el in enumerate(preset.elements, start=1):
            print(
                f"  {i:2d}  {el.role.value:<9}  pos {el.position_mm:8.1f} mm  "
                f"len {el.length_mm:8.1f} mm  dia {el.diameter_mm:5.1f} mm"
            )
        return

    presets = get_presets_by_category(args.category) if args.category else ANTENNA_PRESETS
    for p in presets:
        print(
            f"{p.id:<24} {p.frequency_mhz:8g} MHz  {len(p.elements):2d} el  "
            f"{p.category.value:<12} {p.name}"
        )
