"""MCP tools for quick-look pattern plotting."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import Field

from openuda.mcp.server import get_mcp

logger = logging.getLogger(__name__)
mcp = get_mcp()


@mcp.tool()
async def yagi_plot_patterns(
    design: Annotated[
        dict[str, Any] | None,
        Field(description="Antenna description: frequency_mhz, elements, ground"),
    ] = None,
    preset_id: Annotated[str | None, Field(description="Preset to use instead of design")] = None,
    output_path: Annotated[str, Field(description="Output PNG file path")] = "patterns.png",
) -> dict[str, Any]:
    """Simulate a design and save its azimuth and elevation pattern cuts."""
    try:
        from openuda.core.workspace import reject_path_traversal
        from openuda.mcp.tools_yagi import _resolve_design, _simulator
        from openuda.report.plots import plot_patterns

        reject_path_traversal(output_path)

        description = _resolve_design(design, preset_id)
        logger.info("Plotting patterns to %s", output_path)
        result = await _simulator().simulate(description)
        plot_patterns(result, output_path)

        return {
            "output_path": output_path,
            "gain_dbi": result.gain_dbi,
            "front_to_back_db": result.front_to_back_db,
            "status": "saved",
        }
    except Exception as e:
        logger.exception("yagi_plot_patterns failed")
        return {"error": str(e), "status": "failed"}
