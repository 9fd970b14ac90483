"""Exception types raised across the OpenUda simulation pipeline."""

from __future__ import annotations


class OpenUdaError(Exception):
    """Base class for all OpenUda errors."""


class InvalidDescription(OpenUdaError, ValueError):
    """The antenna description violates a precondition of the encoder."""


class SolverLoadFailed(OpenUdaError, RuntimeError):
    """The solver backend could not be brought to the ready state."""


class SolverOutputUnavailable(OpenUdaError, RuntimeError):
    """The solver ran but its report is missing or empty."""


class SessionStateError(OpenUdaError, RuntimeError):
    """A session operation was requested from the wrong lifecycle state."""


class DegenerateImpedance(OpenUdaError, ValueError):
    """The feed impedance is a near-total mismatch (|Gamma| -> 1)."""

    def __init__(self, resistance_ohm: float, reactance_ohm: float) -> None:
        self.resistance_ohm = resistance_ohm
        self.reactance_ohm = reactance_ohm
        super().__init__(
            f"Degenerate feed impedance {resistance_ohm:g}{reactance_ohm:+g}j ohm: "
            "reflection coefficient magnitude is 1"
        )
