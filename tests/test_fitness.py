"""Tests for optimizer objective functions."""

from __future__ import annotations

import pytest

from openuda.core.schemas import Impedance, Objective, OptimizerSettings, SimulationResult
from openuda.optimize.fitness import calculate_fitness, objective_value, vswr_penalty_factor


def _result(gain: float, fb: float, vswr: float) -> SimulationResult:
    return SimulationResult(
        gain_dbi=gain,
        front_to_back_db=fb,
        input_impedance=Impedance(resistance_ohm=50.0),
        vswr=vswr,
    )


class TestObjectiveValue:
    def test_gain(self) -> None:
        assert objective_value(_result(8.0, 20.0, 1.2), Objective.gain) == 8.0

    def test_fb_ratio(self) -> None:
        assert objective_value(_result(8.0, 20.0, 1.2), Objective.fb_ratio) == 20.0

    def test_balanced(self) -> None:
        value = objective_value(_result(10.0, 20.0, 1.2), Objective.balanced)
        assert value == pytest.approx(0.6 * 10.0 + 0.4 * 20.0)

    def test_objective_from_config_string(self) -> None:
        assert Objective("fbRatio") is Objective.fb_ratio


class TestVSWRPenalty:
    @pytest.mark.parametrize("vswr", [1.0, 2.0, 3.0])
    def test_no_penalty_up_to_threshold(self, vswr: float) -> None:
        assert vswr_penalty_factor(vswr) == 1.0

    def test_soft_penalty_above_threshold(self) -> None:
        assert vswr_penalty_factor(4.0) == pytest.approx(1.0 / 3.0)
        assert vswr_penalty_factor(5.5) == pytest.approx(1.0 / 6.0)

    def test_penalty_is_monotonic(self) -> None:
        factors = [vswr_penalty_factor(v) for v in (3.5, 5.0, 10.0, 999.0)]
        assert factors == sorted(factors, reverse=True)
        assert all(0.0 < f < 1.0 for f in factors)


class TestCalculateFitness:
    def test_matched_design_unpenalized(self) -> None:
        assert calculate_fitness(_result(9.0, 15.0, 1.5), Objective.gain) == 9.0

    def test_mismatched_design_penalized(self) -> None:
        fitness = calculate_fitness(_result(9.0, 15.0, 4.0), Objective.gain)
        assert fitness == pytest.approx(3.0)

    def test_custom_threshold(self) -> None:
        settings = OptimizerSettings(vswr_threshold=1.5, vswr_penalty=1.0)
        fitness = calculate_fitness(_result(9.0, 15.0, 2.0), Objective.gain, settings)
        assert fitness == pytest.approx(9.0 / 1.5)

    def test_penalized_design_ranks_below_matched(self) -> None:
        matched = calculate_fitness(_result(7.0, 12.0, 1.3), Objective.balanced)
        mismatched = calculate_fitness(_result(9.0, 20.0, 8.0), Objective.balanced)
        assert matched > mismatched
