"""Decode a NEC-2 text report into a :class:`SimulationResult`.

The report is treated as a best-effort, partially structured document.
Decoding happens in two stages: :func:`parse_report` pulls raw fields out of
the text into a :class:`RawReport`, collecting a warning for every section it
cannot find, and :func:`build_result` turns those raw fields into the typed
result.  Neither stage raises on malformed input.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field

import numpy as np

from openuda.core.errors import DegenerateImpedance
from openuda.core.schemas import Impedance, PatternSample, SimulationResult

logger = logging.getLogger(__name__)

# ── Report layout ──

IMPEDANCE_MARKER = "ANTENNA INPUT PARAMETERS"
PATTERN_MARKER = "RADIATION PATTERNS"

# Columns of a numeric row in the input-parameter table.
IMP_COL_TAG = 0
IMP_COL_SEG = 1
IMP_COL_RESISTANCE = 6
IMP_COL_REACTANCE = 7
IMP_MIN_COLUMNS = 8

# Columns of a numeric row in a radiation-pattern table.  The polarisation
# sense word (LINEAR/RIGHT/LEFT) is not numeric and is skipped.
PAT_COL_THETA = 0
PAT_COL_PHI = 1
PAT_COL_TOTAL_DB = 4
PAT_COL_ETHETA_MAG = 7
PAT_COL_ETHETA_PHASE = 8
PAT_COL_EPHI_MAG = 9
PAT_COL_EPHI_PHASE = 10
PAT_MIN_COLUMNS = 5
PAT_FULL_COLUMNS = 11

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[Ee][-+]?\d+)?")
_EFFICIENCY_RE = re.compile(
    r"EFFICIENCY\s*=\s*([-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[Ee][-+]?\d+)?)\s*PERCENT",
    re.IGNORECASE,
)
_SECTION_RULE_RE = re.compile(r"-{3,}")

REFERENCE_IMPEDANCE_OHM = 50.0
VSWR_CAP = 999.0
_GAMMA_EPSILON = 1e-9
DEFAULT_EFFICIENCY_PERCENT = 100.0


@dataclass
class RawReport:
    """Fields located in a report, before any derived quantity is computed."""

    impedance: tuple[float, float] | None = None
    horizontal_rows: list[tuple[float, float, float]] = field(default_factory=list)
    vertical_rows: list[tuple[float, float, float]] = field(default_factory=list)
    efficiency_percent: float | None = None
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning("NEC report: %s", message)
        self.warnings.append(message)


# ── Helpers ──


def _numbers(line: str) -> list[float]:
    return [float(tok) for tok in _NUMBER_RE.findall(line)]


def reflection_coefficient(
    resistance_ohm: float,
    reactance_ohm: float,
    z0: float = REFERENCE_IMPEDANCE_OHM,
) -> float:
    """Magnitude of the reflection coefficient of ``R + jX`` against *z0*."""
    num = (resistance_ohm - z0) ** 2 + reactance_ohm**2
    den = (resistance_ohm + z0) ** 2 + reactance_ohm**2
    if den == 0.0:
        return 1.0
    return math.sqrt(num / den)


def vswr_from_impedance(
    resistance_ohm: float,
    reactance_ohm: float,
    z0: float = REFERENCE_IMPEDANCE_OHM,
) -> float:
    """Voltage standing wave ratio of ``R + jX`` on a *z0* line.

    Raises
    ------
    DegenerateImpedance
        When ``|Gamma|`` reaches 1 (open, short, purely reactive or
        non-physical negative resistance), where VSWR is unbounded.
    """
    if resistance_ohm <= 0.0:
        raise DegenerateImpedance(resistance_ohm, reactance_ohm)
    gamma = reflection_coefficient(resistance_ohm, reactance_ohm, z0)
    if gamma >= 1.0 - _GAMMA_EPSILON:
        raise DegenerateImpedance(resistance_ohm, reactance_ohm)
    return (1.0 + gamma) / (1.0 - gamma)


def angular_distance_deg(a: np.ndarray | float, b: float) -> np.ndarray:
    """Smallest absolute difference between angles, wrapping at 360 degrees."""
    diff = np.mod(np.asarray(a, dtype=float) - b + 180.0, 360.0) - 180.0
    return np.abs(diff)


# ── Stage 1: raw fields ──


def _parse_impedance(
    report: str,
    excitation: tuple[int, int] | None,
    raw: RawReport,
) -> None:
    start = report.find(IMPEDANCE_MARKER)
    if start < 0:
        raw.warn("impedance table not found; impedance defaulted to 0")
        return

    rows: list[list[float]] = []
    for line in report[start + len(IMPEDANCE_MARKER):].splitlines():
        if rows and (_SECTION_RULE_RE.search(line) or not line.strip()):
            break
        values = _numbers(line)
        if len(values) < IMP_MIN_COLUMNS:
            continue
        if not (values[IMP_COL_TAG].is_integer() and values[IMP_COL_SEG].is_integer()):
            continue
        rows.append(values)

    if not rows:
        raw.warn("impedance table has no data rows; impedance defaulted to 0")
        return

    chosen = rows[0]
    if excitation is not None:
        tag, seg = excitation
        for values in rows:
            if int(values[IMP_COL_TAG]) == tag and int(values[IMP_COL_SEG]) == seg:
                chosen = values
                break
        else:
            raw.warn(
                f"no impedance row for tag {tag} segment {seg}; using first row "
                f"(tag {int(chosen[IMP_COL_TAG])} segment {int(chosen[IMP_COL_SEG])})"
            )

    raw.impedance = (chosen[IMP_COL_RESISTANCE], chosen[IMP_COL_REACTANCE])


def _parse_pattern_block(block: str, vertical: bool) -> list[tuple[float, float, float]]:
    rows: list[tuple[float, float, float]] = []
    for line in block.splitlines():
        values = _numbers(line)
        if len(values) < PAT_MIN_COLUMNS:
            # The table ends at the first non-data line, before any card echo.
            if rows:
                break
            continue
        if vertical:
            angle = 90.0 - values[PAT_COL_THETA]
        else:
            angle = values[PAT_COL_PHI]
        gain = values[PAT_COL_TOTAL_DB]
        phase = 0.0
        if len(values) >= PAT_FULL_COLUMNS:
            if values[PAT_COL_ETHETA_MAG] >= values[PAT_COL_EPHI_MAG]:
                phase = values[PAT_COL_ETHETA_PHASE]
            else:
                phase = values[PAT_COL_EPHI_PHASE]
        rows.append((angle, gain, phase))
    return rows


def _parse_patterns(report: str, raw: RawReport) -> None:
    blocks = report.split(PATTERN_MARKER)[1:]
    if not blocks:
        raw.warn("no radiation pattern sections found")
        return

    raw.horizontal_rows = _parse_pattern_block(blocks[0], vertical=False)
    if not raw.horizontal_rows:
        raw.warn("horizontal pattern section has no data rows")

    if len(blocks) < 2:
        raw.warn("vertical pattern section not found")
        return
    raw.vertical_rows = _parse_pattern_block(blocks[1], vertical=True)
    if not raw.vertical_rows:
        raw.warn("vertical pattern section has no data rows")


def _parse_efficiency(report: str, raw: RawReport) -> None:
    match = _EFFICIENCY_RE.search(report)
    if match is None:
        raw.warn(
            f"efficiency line not found; assuming lossless conductors "
            f"({DEFAULT_EFFICIENCY_PERCENT:g}%)"
        )
        return
    raw.efficiency_percent = float(match.group(1))


def parse_report(report: str, excitation: tuple[int, int] | None = None) -> RawReport:
    """Extract raw fields from a NEC report.

    Parameters
    ----------
    report:
        Full text of the solver output.
    excitation:
        ``(tag, segment)`` of the driven segment; selects the impedance row.
        When ``None`` the first row of the table is used.
    """
    raw = RawReport()
    if not report or not report.strip():
        raw.warn("report is empty")
        return raw
    _parse_impedance(report, excitation, raw)
    _parse_patterns(report, raw)
    _parse_efficiency(report, raw)
    return raw


# ── Stage 2: typed result ──


def front_to_back(samples: list[PatternSample]) -> float:
    """Peak gain minus gain of the sample nearest the antipode of the peak.

    No interpolation between samples is performed.
    """
    angles = np.array([s.angle_deg for s in samples], dtype=float)
    gains = np.array([s.gain_db for s in samples], dtype=float)
    peak = int(np.argmax(gains))
    back_angle = (angles[peak] + 180.0) % 360.0
    back = int(np.argmin(angular_distance_deg(angles, back_angle)))
    return float(gains[peak] - gains[back])


def build_result(raw: RawReport, frequency_mhz: float = 0.0) -> SimulationResult:
    """Build the typed result from raw fields, defaulting whatever is missing."""
    warnings = list(raw.warnings)

    def warn(message: str) -> None:
        logger.warning("NEC report: %s", message)
        warnings.append(message)

    horizontal = [PatternSample(angle_deg=a, gain_db=g, phase_deg=p) for a, g, p in raw.horizontal_rows]
    vertical = [PatternSample(angle_deg=a, gain_db=g, phase_deg=p) for a, g, p in raw.vertical_rows]

    resistance, reactance = raw.impedance if raw.impedance is not None else (0.0, 0.0)
    degenerate = False
    try:
        vswr = vswr_from_impedance(resistance, reactance)
    except DegenerateImpedance as e:
        degenerate = True
        vswr = VSWR_CAP
        if raw.impedance is not None:
            warn(f"{e}; VSWR capped at {VSWR_CAP:g}")
    vswr = min(vswr, VSWR_CAP)

    all_gains = [s.gain_db for s in horizontal] + [s.gain_db for s in vertical]
    gain = max(all_gains) if all_gains else 0.0

    if horizontal:
        fb = front_to_back(horizontal)
    else:
        fb = 0.0
        warn("front-to-back ratio unavailable without horizontal samples; reported as 0")

    efficiency = DEFAULT_EFFICIENCY_PERCENT
    if raw.efficiency_percent is not None:
        efficiency = min(max(raw.efficiency_percent, 0.0), 100.0)

    return SimulationResult(
        gain_dbi=gain,
        front_to_back_db=fb,
        input_impedance=Impedance(resistance_ohm=resistance, reactance_ohm=reactance),
        vswr=vswr,
        efficiency_percent=efficiency,
        horizontal_pattern=horizontal,
        vertical_pattern=vertical,
        frequency_mhz=frequency_mhz,
        degenerate_impedance=degenerate,
        warnings=warnings,
    )


def decode(
    report: str,
    excitation: tuple[int, int] | None = None,
    frequency_mhz: float = 0.0,
) -> SimulationResult:
    """Decode a NEC report into a :class:`SimulationResult`.

    Never raises on malformed input: missing sections produce defaulted
    fields and an entry in ``result.warnings``.
    """
    return build_result(parse_report(report, excitation), frequency_mhz)
