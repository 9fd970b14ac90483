"""Report builder: generates markdown reports from run bundles."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml


class ReportBuilder:
    """Build reports from an OpenUda run bundle directory.

    Parameters
    ----------
    run_dir:
        Path to the run bundle directory (e.g. ``workspace/runs/<run_id>/``).
    """

    def __init__(self, run_dir: Path) -> None:
        self.run_dir = Path(run_dir)
        self.artifacts_dir = self.run_dir / "artifacts"
        self._manifest: dict[str, Any] | None = None

    def _load_manifest(self) -> dict[str, Any]:
        """Load the run manifest if available."""
        if self._manifest is not None:
            return self._manifest

        manifest_path = self.run_dir / "manifest.json"
        if manifest_path.exists():
            self._manifest = json.loads(manifest_path.read_text())
        else:
            self._manifest = {}
        return self._manifest

    def _load_json_artifact(self, *parts: str) -> Any | None:
        """Load a JSON artifact from the artifacts directory."""
        path = self.artifacts_dir.joinpath(*parts)
        if path.exists():
            try:
                return json.loads(path.read_text())
            except (json.JSONDecodeError, OSError):
                return None
        return None

    def _load_design(self, name: str) -> dict[str, Any] | None:
        path = self.artifacts_dir / "designs" / name
        if not path.exists():
            return None
        try:
            data = yaml.safe_load(path.read_text())
        except (yaml.YAMLError, OSError):
            return None
        return data if isinstance(data, dict) else None

    def _list_artifacts(self, subdir: str, suffix: str = "") -> list[Path]:
        """List artifact files in a subdirectory."""
        d = self.artifacts_dir / subdir
        if not d.exists():
            return []
        files = sorted(d.iterdir())
        if suffix:
            files = [f for f in files if f.suffix == suffix]
        return files

    @staticmethod
    def _result_lines(data: dict[str, Any]) -> list[str]:
        lines = []
        if "gain_dbi" in data:
            lines.append(f"- Gain: {data['gain_dbi']:.2f} dBi")
        if "front_to_back_db" in data:
            lines.append(f"- Front-to-back ratio: {data['front_to_back_db']:.2f} dB")
        z = data.get("input_impedance")
        if z:
            lines.append(
                f"- Input impedance: {z['resistance_ohm']:.2f} {z['reactance_ohm']:+.2f}j ohm"
            )
        if "vswr" in data:
            flag = " (degenerate, capped)" if data.get("degenerate_impedance") else ""
            lines.append(f"- VSWR (50 ohm): {data['vswr']:.2f}{flag}")
        if "efficiency_percent" in data:
            lines.append(f"- Efficiency: {data['efficiency_percent']:.1f}%")
        for w in data.get("warnings", []):
            lines.append(f"- Warning: {w}")
        return lines

    @staticmethod
    def _design_table(design: dict[str, Any]) -> list[str]:
        lines = [
            "| # | Role | Position (mm) | Length (mm) | Diameter (mm) |",
            "|---|------|---------------|-------------|---------------|",
        ]
        for i, el in enumerate(design.get("elements", []), start=1):
            lines.append(
                f"| {i} | {el['role']} | {el['position_mm']:.1f} | "
                f"{el['length_mm']:.1f} | {el['diameter_mm']:.1f} |"
            )
        return lines

    def build_markdown(self) -> str:
        """Build a Markdown report and return it as a string."""
        manifest = self._load_manifest()
        sections = []

        run_id = manifest.get("run_id", self.run_dir.name)
        sections.append(f"# OpenUda Run Report: {run_id}\n")
        sections.append(
            f"**Generated**: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}\n"
        )
        if manifest.get("timestamp"):
            sections.append(f"**Run timestamp**: {manifest['timestamp']}\n")

        sections.append("## Configuration\n")
        if manifest.get("config_hash"):
            sections.append(f"- Config hash: `{manifest['config_hash']}`")
        if manifest.get("design_hash"):
            sections.append(f"- Design hash: `{manifest['design_hash']}`")
        if manifest.get("solver_version"):
            sections.append(f"- Solver: {manifest['solver_version']}")
        if manifest.get("objective"):
            sections.append(f"- Objective: {manifest['objective']}")
        sections.append("")

        has_content = False

        for name, heading in [("initial.yaml", "Initial Design"), ("best.yaml", "Optimized Design")]:
            design = self._load_design(name)
            if design:
                has_content = True
                sections.append(f"## {heading}\n")
                sections.append(f"Frequency: {design.get('frequency_mhz', 0):g} MHz\n")
                sections.extend(self._design_table(design))
                sections.append("")

        result_files = self._list_artifacts("results", ".json")
        result_files = [f for f in result_files if f.stem != "history"]
        if result_files:
            has_content = True
            sections.append("## Performance\n")
            for f in result_files:
                data = self._load_json_artifact("results", f.name)
                if isinstance(data, dict):
                    sections.append(f"### {f.stem}\n")
                    sections.extend(self._result_lines(data))
                    sections.append("")

        history = self._load_json_artifact("results", "history.json")
        if isinstance(history, list) and history:
            has_content = True
            sections.append("## Optimization History\n")
            sections.append("| Generation | Best fitness | Gain (dBi) | F/B (dB) | VSWR | Failures |")
            sections.append("|------------|--------------|------------|----------|------|----------|")
            for row in history:
                def fmt(key: str) -> str:
                    val = row.get(key)
                    return "n/a" if val is None else f"{val:.2f}"

                sections.append(
                    f"| {row.get('generation')} | {fmt('best_fitness')} | {fmt('gain_dbi')} | "
                    f"{fmt('front_to_back_db')} | {fmt('vswr')} | {row.get('failures', 0)} |"
                )
            sections.append("")

        plot_files = self._list_artifacts("plots", ".png")
        if plot_files:
            has_content = True
            sections.append("## Plots\n")
            for f in plot_files:
                rel = f.relative_to(self.run_dir)
                sections.append(f"![{f.stem}]({rel})\n")

        artifacts = manifest.get("artifacts", [])
        if artifacts:
            sections.append("## Artifacts\n")
            for a in artifacts:
                sections.append(f"- `{a}`")
            sections.append("")

        if not has_content:
            sections.append(
                "No artifacts found in this run bundle. "
                "Run `openuda simulate` or `openuda optimize` first.\n"
            )

        return "\n".join(sections)
