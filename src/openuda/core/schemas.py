"""Pydantic schemas for OpenUda configuration and data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ──


class ElementRole(str, Enum):
    reflector = "reflector"
    driven = "driven"
    director = "director"


class GroundKind(str, Enum):
    none = "none"
    perfect = "perfect"
    real = "real"


class Objective(str, Enum):
    gain = "gain"
    fb_ratio = "fbRatio"
    balanced = "balanced"


# ── Antenna description ──


class Element(BaseModel):
    """One straight wire element of the Yagi, centred on the boom."""

    model_config = ConfigDict(frozen=True)

    role: ElementRole
    position_mm: float = Field(allow_inf_nan=False)
    length_mm: float = Field(gt=0)
    diameter_mm: float = Field(gt=0)
    segments: int = Field(default=21, gt=0)


class GroundModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: GroundKind = GroundKind.none
    conductivity: float = 0.005  # S/m
    dielectric: float = 13.0  # relative permittivity


class AntennaDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    frequency_mhz: float = Field(gt=0)
    elements: list[Element] = Field(default_factory=list)
    ground: GroundModel = Field(default_factory=GroundModel)
    mount_height_mm: float = Field(default=0.0, ge=0)

    @property
    def has_ground(self) -> bool:
        return self.ground.kind is not GroundKind.none


# ── Simulation results ──


class Impedance(BaseModel):
    model_config = ConfigDict(frozen=True)

    resistance_ohm: float = 0.0
    reactance_ohm: float = 0.0


class PatternSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    angle_deg: float
    gain_db: float
    phase_deg: float = 0.0


class SimulationResult(BaseModel):
    """Performance figures decoded from a single solver report."""

    model_config = ConfigDict(frozen=True)

    gain_dbi: float = 0.0
    front_to_back_db: float = 0.0
    input_impedance: Impedance = Field(default_factory=Impedance)
    vswr: float = Field(default=1.0, ge=1.0)
    efficiency_percent: float = Field(default=100.0, ge=0.0, le=100.0)
    horizontal_pattern: list[PatternSample] = Field(default_factory=list)
    vertical_pattern: list[PatternSample] = Field(default_factory=list)
    frequency_mhz: float = 0.0
    degenerate_impedance: bool = False
    warnings: list[str] = Field(default_factory=list)


# ── Solver / optimizer / MCP specs ──


class SolverSpec(BaseModel):
    backend: str = "nec2c"
    executable: str = "nec2c"
    work_dir: str | None = None
    poll_interval_s: float = Field(default=0.1, gt=0)


class OptimizerSettings(BaseModel):
    objective: Objective = Objective.gain
    population_size: int = Field(default=50, ge=2)
    generations: int = Field(default=30, ge=1)
    mutation_rate: float = Field(default=0.05, ge=0.0, le=1.0)
    mutation_amount: float = Field(default=0.10, ge=0.0)
    elitism: int = Field(default=2, ge=0)
    tournament_size: int = Field(default=5, ge=1)
    vswr_threshold: float = 3.0
    vswr_penalty: float = 2.0
    seed: int | None = None


class MCPSpec(BaseModel):
    server_host: str = "127.0.0.1"
    server_port: int = 8765


class OutputsSpec(BaseModel):
    plots: bool = True


# ── Project config ──


class ProjectMeta(BaseModel):
    name: str
    workspace: str = "./workspace"


class ProjectConfig(BaseModel):
    project: ProjectMeta
    solver: SolverSpec = Field(default_factory=SolverSpec)
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    mcp: MCPSpec = Field(default_factory=MCPSpec)
    outputs: OutputsSpec = Field(default_factory=OutputsSpec)
    preset: str | None = None
    antenna: AntennaDescription | None = None


# ── Run bundle manifest ──


class RunBundleManifest(BaseModel):
    run_id: str
    timestamp: str
    config_hash: str = ""
    design_hash: str = ""
    solver_version: str = ""
    dependency_versions: dict[str, str] = Field(default_factory=dict)
    objective: str = ""
    artifacts: list[str] = Field(default_factory=list)
    status: str = "created"
