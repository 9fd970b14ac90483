"""Predefined Yagi-Uda designs for a quick start.

Positions are measured from the driven element in millimetres.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from openuda.core.schemas import AntennaDescription, Element, ElementRole, GroundModel


class PresetCategory(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    experimental = "experimental"


class AntennaPreset(BaseModel):
    id: str
    name: str
    description: str
    frequency_mhz: float
    category: PresetCategory
    tags: list[str] = Field(default_factory=list)
    elements: list[Element]

    def to_description(self, ground: GroundModel | None = None) -> AntennaDescription:
        return AntennaDescription(
            frequency_mhz=self.frequency_mhz,
            elements=list(self.elements),
            ground=ground or GroundModel(),
        )


def _layout(diameter_mm: float, *rows: tuple[str, float, float]) -> list[Element]:
    return [
        Element(role=ElementRole(role), position_mm=pos, length_mm=length, diameter_mm=diameter_mm)
        for role, pos, length in rows
    ]


ANTENNA_PRESETS: list[AntennaPreset] = [
    AntennaPreset(
        id="fm-broadcast-3el",
        name="3-Element FM Broadcast",
        description="Simple 3-element Yagi for FM radio reception (88-108 MHz)",
        frequency_mhz=98.0,
        category=PresetCategory.beginner,
        tags=["FM", "broadcast", "reception"],
        elements=_layout(
            10.0,
            ("reflector", -408.0, 1530.0),
            ("driven", 0.0, 1428.0),
            ("director", 306.0, 1377.0),
        ),
    ),
    AntennaPreset(
        id="2m-amateur-5el",
        name="5-Element 2m Amateur Radio",
        description="Medium gain Yagi for 2-meter amateur band (144-148 MHz)",
        frequency_mhz=146.0,
        category=PresetCategory.intermediate,
        tags=["2m", "amateur", "VHF"],
        elements=_layout(
            8.0,
            ("reflector", -274.0, 1027.0),
            ("driven", 0.0, 959.0),
            ("director", 206.0, 925.0),
            ("director", 481.0, 918.0),
            ("director", 822.0, 911.0),
        ),
    ),
    AntennaPreset(
        id="70cm-amateur-7el",
        name="7-Element 70cm Amateur Radio",
        description="High gain Yagi for 70cm amateur band (430-440 MHz)",
        frequency_mhz=435.0,
        category=PresetCategory.intermediate,
        tags=["70cm", "amateur", "UHF"],
        elements=_layout(
            6.0,
            ("reflector", -92.0, 345.0),
            ("driven", 0.0, 322.0),
            ("director", 69.0, 310.0),
            ("director", 161.0, 308.0),
            ("director", 276.0, 306.0),
            ("director", 414.0, 304.0),
            ("director", 575.0, 302.0),
        ),
    ),
    AntennaPreset(
        id="wifi-2.4ghz-11el",
        name="11-Element WiFi 2.4GHz",
        description="Long range WiFi antenna for 2.4GHz band",
        frequency_mhz=2450.0,
        category=PresetCategory.advanced,
        tags=["WiFi", "2.4GHz", "long-range"],
        elements=_layout(
            3.0,
            ("reflector", -16.3, 61.2),
            ("driven", 0.0, 57.1),
            ("director", 12.2, 55.1),
            ("director", 28.6, 54.7),
            ("director", 49.0, 54.3),
            ("director", 73.5, 53.9),
            ("director", 102.0, 53.5),
            ("director", 134.7, 53.1),
            ("director", 171.4, 52.7),
            ("director", 212.2, 52.3),
            ("director", 257.1, 51.8),
        ),
    ),
    AntennaPreset(
        id="experimental-wideband",
        name="Experimental Wideband Design",
        description="Experimental design for wideband applications",
        frequency_mhz=300.0,
        category=PresetCategory.experimental,
        tags=["wideband", "experimental", "research"],
        elements=[
            Element(role=ElementRole.reflector, position_mm=-200.0, length_mm=500.0, diameter_mm=12.0),
            Element(role=ElementRole.driven, position_mm=0.0, length_mm=480.0, diameter_mm=10.0),
            *_layout(
                8.0,
                ("director", 150.0, 460.0),
                ("director", 320.0, 450.0),
                ("director", 500.0, 440.0),
                ("director", 690.0, 430.0),
            ),
        ],
    ),
]


def get_preset_by_id(preset_id: str) -> AntennaPreset | None:
    return next((p for p in ANTENNA_PRESETS if p.id == preset_id), None)


def get_presets_by_category(category: PresetCategory | str) -> list[AntennaPreset]:
    category = PresetCategory(category)
    return [p for p in ANTENNA_PRESETS if p.category is category]


def get_presets_by_tag(tag: str) -> list[AntennaPreset]:
    return [p for p in ANTENNA_PRESETS if tag in p.tags]
