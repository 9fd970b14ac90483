"""openuda simulate command: evaluate one design."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path


def cmd_simulate(args: argparse.Namespace) -> None:
    """Simulate the configured design and store a run bundle."""
    from openuda.commands._common import load_target, print_result, write_manifest, write_result
    from openuda.core.config import save_design
    from openuda.core.workspace import Workspace
    from openuda.nec.session import get_session
    from openuda.simulation import Simulator

    config, description = load_target(args)
    workspace = Workspace(Path(config.project.workspace))
    workspace.ensure_dirs()
    ctx = workspace.new_run()

    print(f"[openuda simulate] Project: {config.project.name}")
    print(
        f"[openuda simulate] {len(description.elements)} elements at "
        f"{description.frequency_mhz:g} MHz, ground: {description.ground.kind.value}"
    )

    design_path = ctx.designs_dir / "initial.yaml"
    save_design(description, design_path)
    artifacts = [design_path]

    simulator = Simulator(get_session(config.solver))
    try:
        result = asyncio.run(simulator.simulate(description))
    except Exception:
        write_manifest(ctx, config, description, artifacts, status="failed")
        raise

    print_result("openuda simulate", result)
    artifacts.append(write_result(ctx, "simulation", result))

    if config.outputs.plots:
        from openuda.report.plots import plot_patterns

        artifacts.append(plot_patterns(result, ctx.plots_dir / "patterns.png"))

    write_manifest(ctx, config, description, artifacts, status="completed")
    print(f"[openuda simulate] Run bundle: {ctx.run_dir}")
