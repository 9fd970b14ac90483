"""Tests for the NEC-2 card deck encoder."""

from __future__ import annotations

import itertools

import pytest

from openuda.core.errors import InvalidDescription
from openuda.core.schemas import (
    AntennaDescription,
    Element,
    ElementRole,
    GroundKind,
    GroundModel,
)
from openuda.nec.encoder import driven_index, encode, excitation_point, validate_description


def _cards(deck: str, mnemonic: str) -> list[list[str]]:
    return [line.split() for line in deck.splitlines() if line.startswith(mnemonic + " ") or line == mnemonic]


class TestEncodeThreeElement:
    def test_card_counts(self, three_element_yagi: AntennaDescription) -> None:
        deck = encode(three_element_yagi)
        assert len(_cards(deck, "GW")) == 3
        assert len(_cards(deck, "EX")) == 1
        assert len(_cards(deck, "FR")) == 1
        assert len(_cards(deck, "RP")) == 2
        assert deck.rstrip().endswith("EN")

    def test_excitation_references_driven_tag(self, three_element_yagi: AntennaDescription) -> None:
        deck = encode(three_element_yagi)
        ex = _cards(deck, "EX")[0]
        assert ex[1] == "0"
        assert ex[2] == "2"
        assert ex[3] == "11"
        assert ex[5:7] == ["1.0", "0.0"]

    def test_frequency_card(self, three_element_yagi: AntennaDescription) -> None:
        fr = _cards(encode(three_element_yagi), "FR")[0]
        assert float(fr[5]) == 146.0

    def test_wire_geometry_in_metres(self, three_element_yagi: AntennaDescription) -> None:
        gw = _cards(encode(three_element_yagi), "GW")
        tag, segs, x1, y1, z1, x2, y2, z2, radius = gw[0][1:]
        assert tag == "1"
        assert segs == "21"
        assert float(x1) == pytest.approx(-0.274)
        assert float(x2) == pytest.approx(-0.274)
        assert float(y1) == pytest.approx(-0.5135)
        assert float(y2) == pytest.approx(0.5135)
        assert float(z1) == float(z2) == 0.0
        assert float(radius) == pytest.approx(0.004)

    def test_free_space_has_no_ground_card(self, three_element_yagi: AntennaDescription) -> None:
        deck = encode(three_element_yagi)
        assert _cards(deck, "GN") == []
        assert _cards(deck, "GE")[0] == ["GE", "0"]

    def test_free_space_pattern_requests(self, three_element_yagi: AntennaDescription) -> None:
        horizontal, vertical = _cards(encode(three_element_yagi), "RP")
        assert horizontal[2:4] == ["1", "360"]
        assert float(horizontal[5]) == 90.0
        assert vertical[2:4] == ["181", "1"]

    def test_deterministic(self, three_element_yagi: AntennaDescription) -> None:
        assert encode(three_element_yagi) == encode(three_element_yagi)


class TestGround:
    def test_perfect_ground(self, three_element_yagi: AntennaDescription) -> None:
        desc = three_element_yagi.model_copy(
            update={"ground": GroundModel(kind=GroundKind.perfect)}
        )
        deck = encode(desc)
        assert _cards(deck, "GN") == [["GN", "1"]]
        assert _cards(deck, "GE")[0] == ["GE", "1"]

    def test_real_ground_parameters(self, three_element_yagi: AntennaDescription) -> None:
        desc = three_element_yagi.model_copy(
            update={"ground": GroundModel(kind=GroundKind.real, conductivity=0.01, dielectric=5.0)}
        )
        gn = _cards(encode(desc), "GN")[0]
        assert gn[1] == "2"
        assert float(gn[5]) == 5.0
        assert float(gn[6]) == 0.01

    def test_ground_elevation_sweep_is_upper_hemisphere(
        self, three_element_yagi: AntennaDescription
    ) -> None:
        desc = three_element_yagi.model_copy(
            update={"ground": GroundModel(kind=GroundKind.perfect)}
        )
        horizontal, vertical = _cards(encode(desc), "RP")
        assert float(horizontal[5]) < 90.0
        assert vertical[2] == "91"

    def test_mount_height_sets_z(self, three_element_yagi: AntennaDescription) -> None:
        desc = three_element_yagi.model_copy(update={"mount_height_mm": 5000.0})
        for gw in _cards(encode(desc), "GW"):
            assert float(gw[5]) == pytest.approx(5.0)
            assert float(gw[8]) == pytest.approx(5.0)


class TestExcitationPermutations:
    @pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
    def test_excitation_follows_driven_element(
        self, three_element_yagi: AntennaDescription, order: tuple[int, ...]
    ) -> None:
        elements = [three_element_yagi.elements[i] for i in order]
        desc = three_element_yagi.model_copy(update={"elements": elements})
        expected = elements.index(three_element_yagi.elements[1])

        assert driven_index(desc) == expected
        ex = _cards(encode(desc), "EX")[0]
        assert int(ex[2]) == expected + 1

    def test_even_segment_count_uses_upper_middle(self) -> None:
        desc = AntennaDescription(
            frequency_mhz=146.0,
            elements=[
                Element(role=ElementRole.driven, position_mm=0.0, length_mm=1000.0,
                        diameter_mm=2.0, segments=10),
            ],
        )
        assert excitation_point(desc) == (1, 6)


class TestValidation:
    def test_no_driven_element(self) -> None:
        desc = AntennaDescription(
            frequency_mhz=146.0,
            elements=[
                Element(role=ElementRole.reflector, position_mm=-250.0, length_mm=1000.0, diameter_mm=8.0),
                Element(role=ElementRole.director, position_mm=200.0, length_mm=900.0, diameter_mm=8.0),
            ],
        )
        with pytest.raises(InvalidDescription, match="no driven"):
            encode(desc)

    def test_multiple_driven_elements(self) -> None:
        desc = AntennaDescription(
            frequency_mhz=146.0,
            elements=[
                Element(role=ElementRole.driven, position_mm=0.0, length_mm=960.0, diameter_mm=8.0),
                Element(role=ElementRole.driven, position_mm=200.0, length_mm=960.0, diameter_mm=8.0),
            ],
        )
        with pytest.raises(InvalidDescription, match="2 driven"):
            encode(desc)

    def test_empty_description(self) -> None:
        with pytest.raises(InvalidDescription, match="no elements"):
            validate_description(AntennaDescription(frequency_mhz=146.0))

    def test_invalid_description_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            encode(AntennaDescription(frequency_mhz=146.0))

    def test_bypassed_validation_is_caught(self) -> None:
        bad = Element.model_construct(
            role=ElementRole.driven, position_mm=0.0, length_mm=-1.0, diameter_mm=8.0, segments=21
        )
        desc = AntennaDescription.model_construct(
            frequency_mhz=146.0, elements=[bad], ground=GroundModel(), mount_height_mm=0.0
        )
        with pytest.raises(InvalidDescription, match="length"):
            encode(desc)
