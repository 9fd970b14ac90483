"""Encode an :class:`AntennaDescription` into a NEC-2 input card deck.

Every element becomes one ``GW`` wire lying along the y axis, centred at
``x = position``, so the boom runs along x and the main lobe points to
``phi = 0``.  Dimensions are converted from millimetres to metres.
"""

from __future__ import annotations

import math

from openuda.core.errors import InvalidDescription
from openuda.core.schemas import AntennaDescription, ElementRole, GroundKind

_MM_TO_M = 1.0e-3

# Elevation above the horizon at which the azimuth cut is taken over ground.
GROUND_AZIMUTH_ELEVATION_DEG = 10.0

ANGLE_STEP_DEG = 1.0
AZIMUTH_POINTS = 360
FREE_SPACE_ELEVATION_POINTS = 181
GROUND_ELEVATION_POINTS = 91

# XNDA field of the RP card: major/minor axis output, no normalisation, power gain.
_RP_XNDA = 1000


def validate_description(description: AntennaDescription) -> None:
    """Raise :class:`InvalidDescription` unless the description can be encoded."""
    if not description.elements:
        raise InvalidDescription("Antenna description has no elements")

    if not (math.isfinite(description.frequency_mhz) and description.frequency_mhz > 0):
        raise InvalidDescription(
            f"Frequency must be a positive number of MHz, got {description.frequency_mhz!r}"
        )

    driven = [i for i, el in enumerate(description.elements) if el.role is ElementRole.driven]
    if not driven:
        raise InvalidDescription("Antenna description has no driven element")
    if len(driven) > 1:
        raise InvalidDescription(
            f"Antenna description has {len(driven)} driven elements (indices {driven}); "
            "exactly one is required"
        )

    for i, el in enumerate(description.elements):
        if not math.isfinite(el.position_mm):
            raise InvalidDescription(f"Element {i} has a non-finite position")
        if not (el.length_mm > 0 and math.isfinite(el.length_mm)):
            raise InvalidDescription(f"Element {i} length must be positive, got {el.length_mm!r}")
        if not (el.diameter_mm > 0 and math.isfinite(el.diameter_mm)):
            raise InvalidDescription(
                f"Element {i} diameter must be positive, got {el.diameter_mm!r}"
            )
        if el.segments < 1:
            raise InvalidDescription(f"Element {i} needs at least one segment")


def driven_index(description: AntennaDescription) -> int:
    """Return the zero-based index of the single driven element."""
    validate_description(description)
    return next(
        i for i, el in enumerate(description.elements) if el.role is ElementRole.driven
    )


def excitation_point(description: AntennaDescription) -> tuple[int, int]:
    """Return the ``(tag, segment)`` pair that the ``EX`` card drives.

    Tags are the 1-based element indices; the segment is the middle one.
    """
    idx = driven_index(description)
    segments = description.elements[idx].segments
    return idx + 1, segments // 2 + 1


def encode(description: AntennaDescription, title: str = "OpenUda Yagi-Uda antenna") -> str:
    """Translate *description* into a NEC-2 card deck.

    Raises
    ------
    InvalidDescription
        If the description cannot be simulated; no card is produced.
    """
    validate_description(description)

    cards: list[str] = [
        f"CM {title}",
        f"CM Frequency: {description.frequency_mhz:g} MHz",
        "CE",
    ]

    z = description.mount_height_mm * _MM_TO_M
    for tag, el in enumerate(description.elements, start=1):
        x = el.position_mm * _MM_TO_M
        half = el.length_mm * _MM_TO_M / 2.0
        radius = el.diameter_mm * _MM_TO_M / 2.0
        cards.append(
            f"GW {tag} {el.segments} "
            f"{x:.6f} {-half:.6f} {z:.6f} "
            f"{x:.6f} {half:.6f} {z:.6f} "
            f"{radius:.6g}"
        )

    ground = description.ground
    cards.append("GE 1" if description.has_ground else "GE 0")

    tag, segment = excitation_point(description)
    cards.append(f"EX 0 {tag} {segment} 0 1.0 0.0")

    if ground.kind is GroundKind.perfect:
        cards.append("GN 1")
    elif ground.kind is GroundKind.real:
        cards.append(f"GN 2 0 0 0 {ground.dielectric:g} {ground.conductivity:g}")

    cards.append(f"FR 0 1 0 0 {description.frequency_mhz:g} 0")

    if description.has_ground:
        azimuth_theta = 90.0 - GROUND_AZIMUTH_ELEVATION_DEG
        elevation_points = GROUND_ELEVATION_POINTS
    else:
        azimuth_theta = 90.0
        elevation_points = FREE_SPACE_ELEVATION_POINTS

    # Horizontal pattern: phi 0..359 at fixed theta.
    cards.append(
        f"RP 0 1 {AZIMUTH_POINTS} {_RP_XNDA} {azimuth_theta:g} 0 0 {ANGLE_STEP_DEG:g}"
    )
    # Vertical pattern: theta from zenith down, in the phi = 0 plane.
    cards.append(f"RP 0 {elevation_points} 1 {_RP_XNDA} 0 0 {ANGLE_STEP_DEG:g} 0")

    cards.append("EN")
    return "\n".join(cards) + "\n"
