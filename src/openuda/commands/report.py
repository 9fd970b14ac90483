"""openuda report command: generate reports from run bundles."""

from __future__ import annotations

import argparse
from pathlib import Path


def cmd_report(args: argparse.Namespace) -> None:
    """Generate a report from a run bundle."""
    from openuda.core.config import load_config
    from openuda.core.workspace import Workspace
    from openuda.report.build_report import ReportBuilder

    config = load_config(Path(args.config))
    workspace = Workspace(Path(config.project.workspace))
    run_dir = workspace.run_dir(args.run_id)

    if not run_dir.exists():
        print(f"[openuda report] Run directory not found: {run_dir}")
        return

    builder = ReportBuilder(run_dir)
    report = builder.build_markdown()
    out_path = run_dir / "report.md"
    out_path.write_text(report)
    print(f"[openuda report] Markdown report written to: {out_path}")
