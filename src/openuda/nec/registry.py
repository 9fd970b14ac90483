"""Discovery and construction of solver backend plugins."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any

from openuda.core.schemas import SolverSpec
from openuda.nec.backends import Nec2cBackend, SolverBackend

logger = logging.getLogger(__name__)

_ENTRY_POINT_GROUP = "openuda.solver_backends"

_BUILTIN_BACKENDS: dict[str, type] = {
    "nec2c": Nec2cBackend,
}


def discover_solver_backends() -> dict[str, type]:
    """Discover solver backends, built-in and installed via entry points.

    Looks up all entry points registered under the ``openuda.solver_backends``
    group.  Plugins that fail to import are logged and skipped.

    Returns
    -------
    dict[str, type]
        Mapping from backend name to backend class.
    """
    backends: dict[str, type] = dict(_BUILTIN_BACKENDS)

    eps = importlib.metadata.entry_points()
    if hasattr(eps, "select"):
        selected: Any = eps.select(group=_ENTRY_POINT_GROUP)
    else:
        selected = eps.get(_ENTRY_POINT_GROUP, [])

    for ep in selected:
        try:
            backends[ep.name] = ep.load()
        except Exception:
            logger.warning("Failed to load solver backend plugin '%s'", ep.name, exc_info=True)

    return backends


def create_backend(spec: SolverSpec | None = None) -> SolverBackend:
    """Instantiate the backend named by *spec* (``nec2c`` by default)."""
    spec = spec or SolverSpec()
    backends = discover_solver_backends()
    backend_cls = backends.get(spec.backend)
    if backend_cls is None:
        raise ValueError(
            f"Unknown solver backend '{spec.backend}'. "
            f"Available: {', '.join(sorted(backends))}."
        )
    if backend_cls is Nec2cBackend:
        return Nec2cBackend(executable=spec.executable)
    backend: SolverBackend = backend_cls()
    return backend
