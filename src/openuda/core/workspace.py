"""Workspace and run-bundle management for OpenUda."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path


class RunContext:
    """Context for a single simulation or optimization run within a workspace."""

    def __init__(self, run_dir: Path, run_id: str) -> None:
        self.run_dir = run_dir
        self.run_id = run_id
        self.artifacts_dir = run_dir / "artifacts"
        self.designs_dir = self.artifacts_dir / "designs"
        self.results_dir = self.artifacts_dir / "results"
        self.plots_dir = self.artifacts_dir / "plots"
        self.manifest_path = run_dir / "manifest.json"

    def ensure_dirs(self) -> None:
        """Create all artifact subdirectories."""
        for d in [self.designs_dir, self.results_dir, self.plots_dir]:
            d.mkdir(parents=True, exist_ok=True)

    def relative(self, path: Path) -> str:
        """Return *path* relative to the run directory, as stored in manifests."""
        return str(Path(path).relative_to(self.run_dir))


class Workspace:
    """Manages the OpenUda workspace directory tree."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self.runs_dir = self.root / "runs"
        self.logs_dir = self.root / "logs"

    def ensure_dirs(self) -> None:
        """Create the workspace directory structure."""
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def new_run(self, run_id: str | None = None) -> RunContext:
        """Create a new run context with unique ID and directory structure."""
        if run_id is None:
            ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
            short = uuid.uuid4().hex[:8]
            run_id = f"{ts}_{short}"
        run_dir = self.runs_dir / run_id
        ctx = RunContext(run_dir, run_id)
        ctx.ensure_dirs()
        return ctx

    def run_dir(self, run_id: str) -> Path:
        return self.runs_dir / reject_path_traversal(run_id)

    def is_within_workspace(self, path: str | Path) -> bool:
        """Check if a path is within the workspace root."""
        try:
            resolved = Path(path).resolve()
            return resolved.is_relative_to(self.root)
        except (OSError, ValueError):
            return False


def reject_path_traversal(path: str | Path) -> Path:
    """Reject paths containing ``..`` components that could escape directories.

    Raises :class:`ValueError` if the path contains ``..`` components.
    """
    p = Path(path)
    if ".." in p.parts:
        raise ValueError(
            f"Path {path!r} contains '..' traversal and is not allowed"
        )
    return p
