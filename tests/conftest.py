"""Shared test fixtures for OpenUda tests."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from openuda.core.schemas import AntennaDescription, Element, ElementRole


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Provide a temporary workspace directory."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def sample_config_dict(tmp_path: Path) -> dict:
    """Return a sample openuda.yaml config dict with an explicit antenna."""
    return {
        "project": {
            "name": "yagi_2m_3el",
            "workspace": str(tmp_path / "workspace"),
        },
        "solver": {
            "backend": "nec2c",
            "executable": "nec2c",
        },
        "optimizer": {
            "objective": "balanced",
            "population_size": 10,
            "generations": 3,
            "seed": 7,
        },
        "outputs": {"plots": False},
        "antenna": {
            "frequency_mhz": 146.0,
            "ground": {"kind": "none"},
            "elements": [
                {"role": "reflector", "position_mm": -274.0, "length_mm": 1027.0, "diameter_mm": 8.0},
                {"role": "driven", "position_mm": 0.0, "length_mm": 959.0, "diameter_mm": 8.0},
                {"role": "director", "position_mm": 206.0, "length_mm": 925.0, "diameter_mm": 8.0},
            ],
        },
    }


@pytest.fixture
def sample_config_yaml(tmp_path: Path, sample_config_dict: dict) -> Path:
    """Write sample config to a YAML file and return the path."""
    import yaml

    config_path = tmp_path / "openuda.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f, default_flow_style=False)
    return config_path


@pytest.fixture
def three_element_yagi() -> AntennaDescription:
    """Reflector, driven element and one director at 146 MHz."""
    return AntennaDescription(
        frequency_mhz=146.0,
        elements=[
            Element(role=ElementRole.reflector, position_mm=-274.0, length_mm=1027.0, diameter_mm=8.0),
            Element(role=ElementRole.driven, position_mm=0.0, length_mm=959.0, diameter_mm=8.0),
            Element(role=ElementRole.director, position_mm=206.0, length_mm=925.0, diameter_mm=8.0),
        ],
    )


# ── Synthetic nec2c reports ──


def _impedance_section(rows: Sequence[tuple[int, int, float, float]]) -> list[str]:
    lines = [
        "",
        "                        --------- ANTENNA INPUT PARAMETERS ---------",
        "  TAG   SEG       VOLTAGE (VOLTS)         CURRENT (AMPS)         "
        "IMPEDANCE (OHMS)        ADMITTANCE (MHOS)     POWER",
        "  NO.   NO.     REAL      IMAGINARY     REAL      IMAGINARY     "
        "REAL      IMAGINARY    REAL       IMAGINARY   (WATTS)",
    ]
    for tag, seg, r, x in rows:
        lines.append(
            f" {tag:4d} {seg:5d} 1.0000E+00  0.0000E+00  2.0000E-02  0.0000E+00 "
            f" {r:.4E} {x: .4E}  2.0000E-02  0.0000E+00  1.0000E-02"
        )
    lines.append("")
    return lines


def _pattern_section(rows: Sequence[tuple[float, float, float]]) -> list[str]:
    lines = [
        "",
        "                             ---------- RADIATION PATTERNS -----------",
        "",
        " ---- ANGLES -----     ---- POWER GAINS ----     ---- POLARIZATION ----"
        "   ---- E(THETA) ----    ----- E(PHI) ------",
        "  THETA      PHI       VERT.   HOR.    TOTAL      AXIAL      TILT  SENSE"
        "   MAGNITUDE  PHASE     MAGNITUDE   PHASE",
        " DEGREES   DEGREES      DB      DB      DB        RATIO      DEG.       "
        "     VOLTS/M  DEGREES     VOLTS/M   DEGREES",
    ]
    for theta, phi, total in rows:
        lines.append(
            f" {theta:7.2f} {phi:9.2f}   -999.99 {total:7.2f} {total:7.2f}   0.00000   90.00 LINEAR"
            f"  0.00000E+00    0.00   1.00000E+00   12.00"
        )
    lines.append("")
    return lines


def make_report(
    impedance: Sequence[tuple[int, int, float, float]] | None = ((2, 11, 50.0, 0.0),),
    horizontal: Sequence[tuple[float, float, float]] | None = None,
    vertical: Sequence[tuple[float, float, float]] | None = None,
    efficiency: float | None = 100.0,
) -> str:
    """Build a report laid out like nec2c output.

    ``horizontal`` and ``vertical`` rows are ``(theta, phi, total_db)``.
    """
    lines = ["", "  *********************************", "   NUMERICAL ELECTROMAGNETICS CODE", ""]
    if impedance is not None:
        lines += _impedance_section(impedance)
    if efficiency is not None:
        lines += [
            "                        --------- POWER BUDGET ---------",
            "                        INPUT POWER   =  1.0000E-02 Watts",
            f"                        EFFICIENCY    =  {efficiency:.2f} Percent",
            "",
        ]
    if horizontal is not None:
        lines += _pattern_section(horizontal)
        lines.append(
            "  ***** DATA CARD N0.   9 RP   0   181    1 1000  0.00000E+00  0.00000E+00"
            "  1.00000E+00  0.00000E+00  0.00000E+00  0.00000E+00"
        )
    if vertical is not None:
        lines += _pattern_section(vertical)
    return "\n".join(lines) + "\n"


def azimuth_rows(peak_db: float, back_db: float, side_db: float = -5.0) -> list[tuple[float, float, float]]:
    """Full 360 degree cut at theta 90 with the peak at phi 0 and the back at phi 180."""
    rows = []
    for phi in range(360):
        if phi == 0:
            gain = peak_db
        elif phi == 180:
            gain = back_db
        else:
            gain = side_db
        rows.append((90.0, float(phi), gain))
    return rows


@pytest.fixture
def report_factory():
    """Expose :func:`make_report` to tests."""
    return make_report


@pytest.fixture
def azimuth_factory():
    """Expose :func:`azimuth_rows` to tests."""
    return azimuth_rows
