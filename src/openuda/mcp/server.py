"""MCP server factory and runner for OpenUda."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from openuda.core.config import load_config
from openuda.core.schemas import OptimizerSettings, ProjectConfig, SolverSpec


def create_server(
    config: ProjectConfig | None = None,
    config_path: str | Path | None = None,
) -> FastMCP:
    """Create and return a fully-configured :class:`FastMCP` server.

    All OpenUda tool modules are imported for their side-effect of registering
    tools on the shared ``mcp`` instance.

    Parameters
    ----------
    config:
        An already-loaded project configuration.  Takes precedence over
        *config_path*.
    config_path:
        Path to an ``openuda.yaml`` file.  Ignored when *config* is given.
    """
    if config is None and config_path is not None:
        config = load_config(Path(config_path))

    # Store config on the server instance so tools can access it.
    server = _get_server()
    server._openuda_config = config  # type: ignore[attr-defined]

    return server


def _get_server() -> FastMCP:
    """Return the singleton MCP server, registering all tools on first call."""
    global _server
    if _server is not None:
        return _server

    _server = FastMCP(
        name="openuda",
        instructions=(
            "OpenUda — Yagi-Uda antenna design with the NEC-2 solver. "
            "Tools for listing presets, generating NEC decks, simulating "
            "designs, genetic optimization and pattern plotting."
        ),
    )

    # Import tool modules to trigger @mcp.tool() registrations.
    import openuda.mcp.tools_plot  # noqa: F401
    import openuda.mcp.tools_yagi  # noqa: F401

    return _server


_server: FastMCP | None = None


def get_mcp() -> FastMCP:
    """Return the shared MCP server instance (creating it if needed)."""
    return _get_server()


def get_config() -> ProjectConfig | None:
    """Return the config attached by :func:`create_server`, if any."""
    return getattr(_get_server(), "_openuda_config", None)


def get_solver_spec() -> SolverSpec | None:
    """Solver settings for tool calls, or ``None`` to use the shared default."""
    config = get_config()
    return config.solver if config is not None else None


def get_optimizer_settings(**overrides: Any) -> OptimizerSettings:
    """Optimizer settings from the project config with *overrides* applied.

    Overrides whose value is ``None`` are ignored, so tool arguments the
    caller left out fall back to the configured values.
    """
    config = get_config()
    base = config.optimizer if config is not None else OptimizerSettings()
    given = {key: value for key, value in overrides.items() if value is not None}
    return OptimizerSettings.model_validate({**base.model_dump(), **given})


def run_server(transport: str = "stdio") -> None:
    """Start the MCP server with the given transport.

    Parameters
    ----------
    transport:
        One of ``"stdio"``, ``"sse"``, or ``"streamable-http"``.
    """
    server = _get_server()
    server.run(transport=transport)  # type: ignore[arg-type]
