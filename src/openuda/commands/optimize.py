"""openuda optimize command: genetic search for a better design."""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict
from pathlib import Path


def cmd_optimize(args: argparse.Namespace) -> None:
    """Run the genetic optimizer on the configured design and store a run bundle."""
    from openuda.commands._common import load_target, print_result, write_manifest, write_result
    from openuda.core.config import save_design
    from openuda.core.schemas import OptimizerSettings
    from openuda.core.workspace import Workspace
    from openuda.nec.session import get_session
    from openuda.optimize.genetic import GeneticOptimizer
    from openuda.simulation import Simulator

    config, initial = load_target(args)

    overrides = {
        key: value
        for key, value in {
            "objective": args.objective,
            "generations": args.generations,
            "population_size": args.population,
            "seed": args.seed,
        }.items()
        if value is not None
    }
    settings = OptimizerSettings.model_validate({**config.optimizer.model_dump(), **overrides})
    config = config.model_copy(update={"optimizer": settings})

    workspace = Workspace(Path(config.project.workspace))
    workspace.ensure_dirs()
    ctx = workspace.new_run()

    print(f"[openuda optimize] Project: {config.project.name}")
    print(
        f"[openuda optimize] Objective: {settings.objective.value}, "
        f"population {settings.population_size}, {settings.generations} generations"
    )

    initial_path = ctx.designs_dir / "initial.yaml"
    save_design(initial, initial_path)
    artifacts = [initial_path]

    stop_file = Path(args.stop_file) if args.stop_file else None

    def should_stop() -> bool:
        return stop_file is not None and stop_file.exists()

    optimizer = GeneticOptimizer(
        Simulator(get_session(config.solver)),
        initial,
        settings=settings,
        on_progress=lambda line: print(f"[openuda optimize] {line}"),
        should_stop=should_stop,
    )
    try:
        best_elements = asyncio.run(optimizer.run())
    except Exception:
        write_manifest(ctx, config, initial, artifacts, status="failed")
        raise

    best = initial.model_copy(update={"elements": best_elements})
    best_path = ctx.designs_dir / "best.yaml"
    save_design(best, best_path)
    artifacts.append(best_path)

    history_path = ctx.results_dir / "history.json"
    history_path.write_text(json.dumps([asdict(h) for h in optimizer.history], indent=2))
    artifacts.append(history_path)

    if optimizer.best_result is not None:
        print_result("openuda optimize", optimizer.best_result)
        artifacts.append(write_result(ctx, "best", optimizer.best_result))

    if config.outputs.plots:
        from openuda.report.plots import plot_fitness_history, plot_patterns

        if optimizer.best_result is not None:
            artifacts.append(plot_patterns(optimizer.best_result, ctx.plots_dir / "best_patterns.png"))
        artifacts.append(
            plot_fitness_history(
                [h.best_fitness for h in optimizer.history], ctx.plots_dir / "fitness.png"
            )
        )

    write_manifest(ctx, config, best, artifacts, status="completed")
    print(f"[openuda optimize] Best design: {best_path}")
    print(f"[openuda optimize] Run bundle: {ctx.run_dir}")
