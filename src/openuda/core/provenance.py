"""Provenance tracking for OpenUda run bundles."""

from __future__ import annotations

import hashlib
import importlib.metadata
import json
from datetime import datetime, timezone
from typing import Any


def hash_config(config_dict: dict[str, Any]) -> str:
    """Deterministic hash of a config dictionary."""
    raw = json.dumps(config_dict, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


def hash_design(design_dict: dict[str, Any]) -> str:
    """Deterministic hash of an antenna description (frequency, elements, ground)."""
    raw = json.dumps(design_dict, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


def _get_dependency_versions() -> dict[str, str]:
    """Collect installed versions of key OpenUda dependencies."""
    packages = [
        "openuda",
        "numpy",
        "pydantic",
        "pyyaml",
        "matplotlib",
        "mcp",
    ]
    versions: dict[str, str] = {}
    for pkg in packages:
        try:
            versions[pkg] = importlib.metadata.version(pkg)
        except importlib.metadata.PackageNotFoundError:
            pass
    return versions


def build_manifest(
    run_id: str,
    timestamp: str | None = None,
    config: dict[str, Any] | None = None,
    design: dict[str, Any] | None = None,
    artifacts: list[str] | None = None,
) -> dict[str, Any]:
    """Build a run-bundle manifest dictionary with full provenance."""
    if timestamp is None:
        timestamp = datetime.now(timezone.utc).isoformat()

    manifest: dict[str, Any] = {
        "run_id": run_id,
        "timestamp": timestamp,
        "config_hash": hash_config(config) if config else "",
        "design_hash": hash_design(design) if design else "",
        "dependency_versions": _get_dependency_versions(),
        "artifacts": artifacts or [],
        "status": "created",
    }

    if config:
        solver = config.get("solver", {})
        backend = solver.get("backend", "")
        executable = solver.get("executable", "")
        manifest["solver_version"] = f"{backend} ({executable})" if executable else backend

        optimizer = config.get("optimizer", {})
        manifest["objective"] = optimizer.get("objective", "")

    return manifest
