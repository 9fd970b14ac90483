"""MCP tools for Yagi-Uda simulation and optimization."""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any

from pydantic import Field

from openuda.mcp.server import get_mcp, get_optimizer_settings, get_solver_spec

logger = logging.getLogger(__name__)
mcp = get_mcp()


def _resolve_design(design: dict[str, Any] | None, preset_id: str | None) -> Any:
    from openuda.core.schemas import AntennaDescription
    from openuda.presets import get_preset_by_id

    if design is not None:
        return AntennaDescription.model_validate(design)
    if preset_id is not None:
        preset = get_preset_by_id(preset_id)
        if preset is None:
            raise ValueError(f"Unknown preset: {preset_id}")
        return preset.to_description()
    raise ValueError("Provide either 'design' or 'preset_id'")


def _simulator() -> Any:
    from openuda.nec.session import get_session
    from openuda.simulation import Simulator

    return Simulator(get_session(get_solver_spec()))


def _summary(result: Any) -> dict[str, Any]:
    return {
        "gain_dbi": result.gain_dbi,
        "front_to_back_db": result.front_to_back_db,
        "resistance_ohm": result.input_impedance.resistance_ohm,
        "reactance_ohm": result.input_impedance.reactance_ohm,
        "vswr": result.vswr,
        "efficiency_percent": result.efficiency_percent,
        "degenerate_impedance": result.degenerate_impedance,
        "n_horizontal_samples": len(result.horizontal_pattern),
        "n_vertical_samples": len(result.vertical_pattern),
        "warnings": list(result.warnings),
    }


@mcp.tool()
async def yagi_list_presets(
    category: Annotated[
        str | None, Field(description="Filter: beginner, intermediate, advanced, experimental")
    ] = None,
) -> dict[str, Any]:
    """List the built-in Yagi-Uda designs."""
    try:
        from openuda.presets import ANTENNA_PRESETS, get_presets_by_category

        presets = get_presets_by_category(category) if category else ANTENNA_PRESETS
        return {
            "presets": [
                {
                    "id": p.id,
                    "name": p.name,
                    "frequency_mhz": p.frequency_mhz,
                    "n_elements": len(p.elements),
                    "category": p.category.value,
                    "tags": p.tags,
                }
                for p in presets
            ],
            "count": len(presets),
        }
    except Exception as e:
        logger.exception("yagi_list_presets failed")
        return {"error": str(e), "status": "failed"}


@mcp.tool()
async def yagi_encode(
    design: Annotated[
        dict[str, Any] | None,
        Field(description="Antenna description: frequency_mhz, elements, ground"),
    ] = None,
    preset_id: Annotated[str | None, Field(description="Preset to use instead of design")] = None,
) -> dict[str, Any]:
    """Return the NEC-2 card deck for a design."""
    try:
        from openuda.nec.encoder import encode, excitation_point

        description = _resolve_design(design, preset_id)
        tag, segment = excitation_point(description)
        return {
            "deck": encode(description),
            "excitation_tag": tag,
            "excitation_segment": segment,
            "status": "encoded",
        }
    except Exception as e:
        logger.exception("yagi_encode failed")
        return {"error": str(e), "status": "failed"}


@mcp.tool()
async def yagi_simulate(
    design: Annotated[
        dict[str, Any] | None,
        Field(description="Antenna description: frequency_mhz, elements, ground"),
    ] = None,
    preset_id: Annotated[str | None, Field(description="Preset to use instead of design")] = None,
) -> dict[str, Any]:
    """Simulate a Yagi-Uda design with NEC-2 and return its key metrics."""
    try:
        description = _resolve_design(design, preset_id)
        logger.info(
            "Simulating %d elements at %g MHz", len(description.elements), description.frequency_mhz
        )
        result = await _simulator().simulate(description)
        return {**_summary(result), "status": "simulated"}
    except Exception as e:
        logger.exception("yagi_simulate failed")
        return {"error": str(e), "status": "failed"}


@mcp.tool()
async def yagi_optimize(
    design: Annotated[
        dict[str, Any] | None,
        Field(description="Starting antenna description"),
    ] = None,
    preset_id: Annotated[str | None, Field(description="Preset to start from")] = None,
    objective: Annotated[
        str | None, Field(description="gain, fbRatio or balanced; defaults to the project config")
    ] = None,
    population_size: Annotated[
        int | None, Field(description="Individuals per generation", ge=2)
    ] = None,
    generations: Annotated[int | None, Field(description="Number of generations", ge=1)] = None,
    seed: Annotated[int | None, Field(description="Random seed for reproducible runs")] = None,
) -> dict[str, Any]:
    """Optimize element lengths and spacings with a genetic algorithm."""
    try:
        from openuda.optimize.genetic import GeneticOptimizer

        description = _resolve_design(design, preset_id)
        settings = get_optimizer_settings(
            objective=objective,
            population_size=population_size,
            generations=generations,
            seed=seed,
        )
        progress: list[str] = []
        optimizer = GeneticOptimizer(
            _simulator(), description, settings=settings, on_progress=progress.append
        )
        elements = await optimizer.run()

        out: dict[str, Any] = {
            "elements": [el.model_dump(mode="json") for el in elements],
            "best_fitness": optimizer.best_fitness if math.isfinite(optimizer.best_fitness) else None,
            "progress": progress,
            "settings": settings.model_dump(mode="json"),
            "status": "optimized",
        }
        if optimizer.best_result is not None:
            out["metrics"] = _summary(optimizer.best_result)
        return out
    except Exception as e:
        logger.exception("yagi_optimize failed")
        return {"error": str(e), "status": "failed"}


@mcp.tool()
async def solver_status() -> dict[str, Any]:
    """Report the solver backend, its availability and the session state."""
    try:
        from openuda.nec.registry import discover_solver_backends

        simulator = _simulator()
        session = simulator.session
        return {
            **session.status(),
            "capabilities": session.backend.capabilities(),
            "backends": sorted(discover_solver_backends()),
        }
    except Exception as e:
        logger.exception("solver_status failed")
        return {"error": str(e), "status": "failed"}
