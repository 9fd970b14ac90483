"""Lifecycle of a single solver instance.

A :class:`SolverSession` owns the loaded solver handle and guarantees that
at most one load and at most one solver run are in flight at any time::

    unloaded -> loading -> ready -> running -> ready -> unloaded

Callers that need the whole load, run and unload cycle to themselves hold
:attr:`SolverSession.lock` around it; overlapping callers queue on the lock.

Each run writes its deck to a freshly named input file in the work
directory and removes both the input and the report on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
import uuid
from enum import Enum
from pathlib import Path
from typing import Any

from openuda.core.errors import SessionStateError, SolverLoadFailed, SolverOutputUnavailable
from openuda.core.schemas import SolverSpec
from openuda.nec.backends import SolverBackend, SolverHandle

logger = logging.getLogger(__name__)

_ARTIFACT_PREFIX = "openuda_"


class SessionState(str, Enum):
    unloaded = "unloaded"
    loading = "loading"
    ready = "ready"
    running = "running"


class SolverSession:
    """Owns one solver handle and mediates every access to it.

    Parameters
    ----------
    backend:
        The solver backend to load from.
    work_dir:
        Directory for the per-run input and output files.  Defaults to the
        system temporary directory.
    poll_interval_s:
        How often a caller waiting on another caller's load re-checks state.
    """

    def __init__(
        self,
        backend: SolverBackend,
        work_dir: str | Path | None = None,
        poll_interval_s: float = 0.1,
    ) -> None:
        self.backend = backend
        self.work_dir = Path(work_dir) if work_dir is not None else Path(tempfile.gettempdir())
        self.poll_interval_s = poll_interval_s
        self._state = SessionState.unloaded
        self._handle: SolverHandle | None = None
        self.lock = asyncio.Lock()
        self.spec: SolverSpec | None = None

    # ── State ──

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state in (SessionState.ready, SessionState.running)

    def status(self) -> dict[str, Any]:
        return {
            "backend": getattr(self.backend, "name", type(self.backend).__name__),
            "state": self._state.value,
            "loaded": self.is_loaded,
            "loading": self._state is SessionState.loading,
        }

    # ── Lifecycle ──

    async def load(self) -> None:
        """Bring the session to ``ready``, loading the solver if necessary.

        A second caller arriving while a load is in progress waits for it to
        finish and then re-checks, since the session may have been unloaded
        again in the meantime.
        """
        while True:
            if self._state in (SessionState.ready, SessionState.running):
                return
            if self._state is SessionState.loading:
                await asyncio.sleep(self.poll_interval_s)
                continue

            self._state = SessionState.loading
            try:
                handle = await self.backend.load()
            except SolverLoadFailed:
                self._state = SessionState.unloaded
                raise
            except Exception as e:
                self._state = SessionState.unloaded
                raise SolverLoadFailed(f"Failed to load solver backend: {e}") from e

            # unload() during the await drops this load on the floor.
            if self._state is not SessionState.loading:
                continue
            self._handle = handle
            self._state = SessionState.ready
            logger.debug("Solver session ready")
            return

    def unload(self) -> None:
        """Drop the solver handle unconditionally and return to ``unloaded``."""
        self._handle = None
        self._state = SessionState.unloaded
        logger.debug("Solver session unloaded")

    # ── Execution ──

    async def run(self, command_text: str) -> str:
        """Run one card deck through the solver and return the report text.

        Raises
        ------
        SessionStateError
            If the session is not ``ready``.
        SolverOutputUnavailable
            If the solver left no readable, non-empty report.
        """
        if self._state is not SessionState.ready or self._handle is None:
            raise SessionStateError(
                f"run() requires a ready session, current state is '{self._state.value}'"
            )

        handle = self._handle
        self._state = SessionState.running

        stem = f"{_ARTIFACT_PREFIX}{uuid.uuid4().hex}"
        input_path = self.work_dir / f"{stem}.nec"
        output_path = self.work_dir / f"{stem}.out"
        alt_output_path = self.work_dir / f"{stem}.OUT"

        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
            input_path.write_text(command_text)

            try:
                exit_code = await handle.run(input_path, output_path)
            except OSError as e:
                logger.warning("Solver invocation failed: %s; trying to read output anyway", e)
                exit_code = -1
            if exit_code != 0:
                logger.warning("Solver exited with code %s; reading output anyway", exit_code)

            return self._read_report(output_path, alt_output_path)
        finally:
            for path in (input_path, output_path, alt_output_path):
                try:
                    path.unlink(missing_ok=True)
                except OSError:
                    logger.warning("Failed to remove solver artifact %s", path, exc_info=True)
            if self._state is SessionState.running:
                self._state = SessionState.ready

    @staticmethod
    def _read_report(*candidates: Path) -> str:
        for path in candidates:
            if not path.exists():
                continue
            try:
                text = path.read_text(errors="replace")
            except OSError as e:
                raise SolverOutputUnavailable(f"Cannot read solver output {path}: {e}") from e
            if not text.strip():
                raise SolverOutputUnavailable(f"Solver output {path} is empty")
            return text
        raise SolverOutputUnavailable(f"Solver produced no output file {candidates[0].name}")


# ── Process-wide default session ──

_session: SolverSession | None = None


def get_session(spec: SolverSpec | None = None) -> SolverSession:
    """Return the shared solver session, creating it on first call.

    A *spec* that differs from the one the shared session was built from
    replaces it with a fresh session.  A session installed without a spec
    is returned as is.
    """
    global _session
    if _session is not None:
        if spec is None or _session.spec is None or spec == _session.spec:
            return _session
        logger.info("Solver settings changed; replacing the shared solver session")

    from openuda.nec.registry import create_backend

    spec = spec or SolverSpec()
    _session = SolverSession(
        create_backend(spec),
        work_dir=spec.work_dir,
        poll_interval_s=spec.poll_interval_s,
    )
    _session.spec = spec
    return _session


def reset_session() -> None:
    """Unload and forget the shared session (the next call builds a new one)."""
    global _session
    if _session is not None:
        _session.unload()
    _session = None
