"""One-call simulation: description in, decoded results out."""

from __future__ import annotations

import logging
import math

from openuda.core.schemas import (
    AntennaDescription,
    Element,
    ElementRole,
    GroundKind,
    GroundModel,
    SimulationResult,
)
from openuda.nec.decoder import decode
from openuda.nec.encoder import encode, excitation_point
from openuda.nec.session import SolverSession, get_session

logger = logging.getLogger(__name__)


class Simulator:
    """Compose encoder, solver session and decoder.

    The session is unloaded after every call, successful or not, so that no
    solver state carries over from one geometry to the next.  The session
    lock is held from load to unload, so calls sharing a session run one
    after another.
    """

    def __init__(self, session: SolverSession) -> None:
        self.session = session

    async def simulate(self, description: AntennaDescription) -> SimulationResult:
        """Simulate *description* and return its decoded performance.

        Errors from the encoder, session or decoder propagate unchanged after
        the session has been unloaded.
        """
        async with self.session.lock:
            try:
                deck = encode(description)
                excitation = excitation_point(description)
                await self.session.load()
                report = await self.session.run(deck)
                result = decode(
                    report, excitation=excitation, frequency_mhz=description.frequency_mhz
                )
                logger.debug(
                    "Simulated %d elements at %g MHz: %.2f dBi, F/B %.2f dB, VSWR %.2f",
                    len(description.elements),
                    description.frequency_mhz,
                    result.gain_dbi,
                    result.front_to_back_db,
                    result.vswr,
                )
                return result
            finally:
                self.session.unload()

    def release(self) -> None:
        """Unload the underlying session unless another call is using it."""
        if self.session.lock.locked():
            return
        self.session.unload()


async def simulate(description: AntennaDescription) -> SimulationResult:
    """Simulate *description* on the process-wide default session."""
    return await Simulator(get_session()).simulate(description)


SELF_TEST_DIPOLE = AntennaDescription(
    frequency_mhz=146.0,
    elements=[
        Element(role=ElementRole.driven, position_mm=0.0, length_mm=1000.0, diameter_mm=2.0),
    ],
    ground=GroundModel(kind=GroundKind.perfect),
    mount_height_mm=5000.0,
)


async def self_test(simulator: Simulator | None = None) -> bool:
    """Simulate a 1 m dipole and report whether the solver returned a finite gain."""
    simulator = simulator or Simulator(get_session())
    try:
        result = await simulator.simulate(SELF_TEST_DIPOLE)
    except Exception:
        logger.exception("Solver self-test failed")
        return False
    logger.info("Solver self-test: %.2f dBi, Z = %s", result.gain_dbi, result.input_impedance)
    return math.isfinite(result.gain_dbi) and not result.degenerate_impedance
