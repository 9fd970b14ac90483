"""openuda init command: scaffold a new project."""

from __future__ import annotations

import argparse
from pathlib import Path

_EXAMPLE_YAML = """\
project:
  name: "{name}"
  workspace: "./workspace"

solver:
  backend: nec2c
  executable: nec2c
  # work_dir: /tmp/openuda

optimizer:
  objective: {objective}
  population_size: 50
  generations: 30
  mutation_rate: 0.05
  mutation_amount: 0.1
  elitism: 2
  tournament_size: 5
  vswr_threshold: 3.0
  vswr_penalty: 2.0
  # seed: 1234

outputs:
  plots: true

preset: {preset}

# Replace the preset with an explicit design:
# antenna:
#   frequency_mhz: 146
#   ground:
#     kind: none          # none | perfect | real
#   elements:
#     - {{role: reflector, position_mm: -274, length_mm: 1027, diameter_mm: 8}}
#     - {{role: driven,    position_mm: 0,    length_mm: 959,  diameter_mm: 8}}
#     - {{role: director,  position_mm: 206,  length_mm: 925,  diameter_mm: 8}}
"""


def cmd_init(args: argparse.Namespace) -> None:
    """Create a new OpenUda project scaffold."""
    from openuda.presets import get_preset_by_id

    if get_preset_by_id(args.preset) is None:
        raise ValueError(f"Unknown preset '{args.preset}'. Run 'openuda presets' for the list.")

    project_dir = Path(args.dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    config_path = project_dir / "openuda.yaml"
    if config_path.exists():
        print(f"[openuda init] Config already exists: {config_path}")
        return

    config_path.write_text(
        _EXAMPLE_YAML.format(name=args.name, preset=args.preset, objective=args.objective)
    )

    workspace_dir = project_dir / "workspace"
    for subdir in ["runs", "logs"]:
        (workspace_dir / subdir).mkdir(parents=True, exist_ok=True)

    print(f"[openuda init] Project '{args.name}' created in {project_dir.resolve()}")
    print(f"[openuda init] Config: {config_path}")
    print(f"[openuda init] Workspace: {workspace_dir}")
    print("[openuda init] Edit openuda.yaml, then run: openuda simulate")
