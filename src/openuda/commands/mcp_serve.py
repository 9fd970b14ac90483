"""openuda mcp serve command: start the MCP server."""

from __future__ import annotations

import argparse
from pathlib import Path


def cmd_mcp_serve(args: argparse.Namespace) -> None:
    """Start the OpenUda MCP server with the project's solver and optimizer settings."""
    from openuda.mcp.server import create_server, get_solver_spec, run_server

    config_path = Path(args.config)
    create_server(config_path=config_path if config_path.exists() else None)

    solver = get_solver_spec()
    if solver is None:
        print(f"[openuda mcp serve] No {config_path}; using the default nec2c on PATH")
    else:
        print(f"[openuda mcp serve] Solver: {solver.backend} ({solver.executable})")

    transport = "streamable-http" if args.transport == "http" else args.transport
    print(f"[openuda mcp serve] Starting MCP server (transport={transport})")
    run_server(transport=transport)
