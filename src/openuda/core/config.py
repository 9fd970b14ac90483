"""Configuration loading and saving for OpenUda."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from openuda.core.schemas import AntennaDescription, ProjectConfig

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> ProjectConfig:
    """Load and validate an openuda.yaml config file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file: expected a YAML mapping, got {type(raw).__name__}")

    config = ProjectConfig.model_validate(raw)

    if config.antenna is None and config.preset is None:
        logger.warning("Config %s defines neither 'antenna' nor 'preset'", path)

    return config


def save_config(config: ProjectConfig, path: str | Path) -> None:
    """Save a ProjectConfig to a YAML file."""
    path = Path(path)
    data = config.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def resolve_antenna(config: ProjectConfig) -> AntennaDescription:
    """Return the antenna to work on: the explicit ``antenna`` block, else the preset."""
    if config.antenna is not None:
        return config.antenna
    if config.preset is not None:
        from openuda.presets import get_preset_by_id

        preset = get_preset_by_id(config.preset)
        if preset is None:
            raise ValueError(f"Unknown preset {config.preset!r} in config")
        return preset.to_description()
    raise ValueError("Config defines neither an 'antenna' block nor a 'preset'")


def save_design(description: AntennaDescription, path: str | Path) -> None:
    """Write an antenna description as YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(description.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)


def load_design(path: str | Path) -> AntennaDescription:
    """Read an antenna description written by :func:`save_design`."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Design file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid design file: expected a YAML mapping, got {type(raw).__name__}")
    return AntennaDescription.model_validate(raw)
