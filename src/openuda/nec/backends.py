"""Solver backend protocol and the bundled ``nec2c`` subprocess backend."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from openuda.core.errors import SolverLoadFailed

logger = logging.getLogger(__name__)


@runtime_checkable
class SolverHandle(Protocol):
    """A loaded solver instance able to turn one input deck into one report."""

    async def run(self, input_path: Path, output_path: Path) -> int:
        """Solve *input_path*, writing the report to *output_path*.

        Returns the solver's exit code.  A non-zero code does not by itself
        mean that no report was written.
        """
        ...


@runtime_checkable
class SolverBackend(Protocol):
    """Protocol for the external method-of-moments solver.

    Implementations wrap a NEC-2 engine (a local executable, bindings, a
    remote service) behind a load step that yields a :class:`SolverHandle`.
    """

    name: str

    async def load(self) -> SolverHandle:
        """Prepare the solver and return a handle to it.

        Raises :class:`~openuda.core.errors.SolverLoadFailed` when the solver
        is unavailable.
        """
        ...

    def capabilities(self) -> dict[str, Any]:
        """Return a dictionary describing the backend."""
        ...


class Nec2cHandle:
    """Handle on a resolved ``nec2c`` executable."""

    def __init__(self, executable: Path) -> None:
        self.executable = executable

    async def run(self, input_path: Path, output_path: Path) -> int:
        proc = await asyncio.create_subprocess_exec(
            str(self.executable),
            "-i",
            str(input_path),
            "-o",
            str(output_path),
            cwd=str(input_path.parent),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        if stdout:
            logger.debug("nec2c stdout: %s", stdout.decode(errors="replace").strip())
        if stderr:
            logger.debug("nec2c stderr: %s", stderr.decode(errors="replace").strip())
        return proc.returncode if proc.returncode is not None else -1


class Nec2cBackend:
    """Run the ``nec2c`` command-line solver as a child process per simulation.

    Parameters
    ----------
    executable:
        Name looked up on ``PATH``, or a path to the binary.
    """

    name: str = "nec2c"

    def __init__(self, executable: str = "nec2c") -> None:
        self.executable = executable

    def _resolve(self) -> Path | None:
        candidate = Path(self.executable).expanduser()
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate.resolve()
        found = shutil.which(self.executable)
        return Path(found) if found else None

    async def load(self) -> Nec2cHandle:
        path = self._resolve()
        if path is None:
            raise SolverLoadFailed(
                f"NEC-2 solver executable {self.executable!r} not found on PATH. "
                "Install nec2c or set solver.executable in openuda.yaml."
            )
        logger.info("Loaded nec2c solver from %s", path)
        return Nec2cHandle(path)

    def capabilities(self) -> dict[str, Any]:
        return {
            "solver": "nec2c",
            "executable": self.executable,
            "available": self._resolve() is not None,
            "supports_ground": ["none", "perfect", "real"],
        }
