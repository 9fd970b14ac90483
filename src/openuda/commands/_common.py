"""Helpers shared by the simulate/optimize/encode commands."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from openuda.core.schemas import AntennaDescription, ProjectConfig, ProjectMeta, SimulationResult
from openuda.core.workspace import RunContext

logger = logging.getLogger(__name__)


def load_target(args: argparse.Namespace) -> tuple[ProjectConfig, AntennaDescription]:
    """Resolve the project config and antenna from ``--preset`` or ``--config``."""
    from openuda.core.config import load_config, resolve_antenna

    preset = getattr(args, "preset", None)
    config_path = Path(getattr(args, "config", "openuda.yaml"))

    if preset:
        config = load_config(config_path) if config_path.exists() else ProjectConfig(
            project=ProjectMeta(name=preset)
        )
        config = config.model_copy(update={"preset": preset, "antenna": None})
    else:
        config = load_config(config_path)

    return config, resolve_antenna(config)


def write_result(ctx: RunContext, name: str, result: SimulationResult) -> Path:
    path = ctx.results_dir / f"{name}.json"
    path.write_text(result.model_dump_json(indent=2))
    return path


def write_manifest(
    ctx: RunContext,
    config: ProjectConfig,
    design: AntennaDescription,
    artifacts: list[Path],
    status: str,
) -> dict[str, Any]:
    from openuda.core.provenance import build_manifest
    from openuda.core.schemas import RunBundleManifest

    manifest = build_manifest(
        ctx.run_id,
        config=config.model_dump(mode="json"),
        design=design.model_dump(mode="json"),
        artifacts=[ctx.relative(p) for p in artifacts],
    )
    manifest["status"] = status
    manifest = RunBundleManifest.model_validate(manifest).model_dump()
    ctx.manifest_path.write_text(json.dumps(manifest, indent=2))
    return manifest


def print_result(prefix: str, result: SimulationResult) -> None:
    z = result.input_impedance
    print(f"[{prefix}] Gain: {result.gain_dbi:.2f} dBi")
    print(f"[{prefix}] F/B ratio: {result.front_to_back_db:.2f} dB")
    print(f"[{prefix}] Impedance: {z.resistance_ohm:.2f} {z.reactance_ohm:+.2f}j ohm")
    flag = " (degenerate)" if result.degenerate_impedance else ""
    print(f"[{prefix}] VSWR: {result.vswr:.2f}{flag}")
    print(f"[{prefix}] Efficiency: {result.efficiency_percent:.1f}%")
    for w in result.warnings:
        print(f"[{prefix}] warning: {w}")
