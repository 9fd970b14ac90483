"""openuda selftest command: check that the solver answers."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path


def cmd_selftest(args: argparse.Namespace) -> None:
    """Simulate a reference dipole and exit non-zero if the solver fails."""
    from openuda.core.config import load_config
    from openuda.core.schemas import SolverSpec
    from openuda.nec.session import get_session
    from openuda.simulation import Simulator, self_test

    config_path = Path(args.config)
    spec = load_config(config_path).solver if config_path.exists() else SolverSpec()
    if args.executable:
        spec = spec.model_copy(update={"executable": args.executable})

    ok = asyncio.run(self_test(Simulator(get_session(spec))))
    if ok:
        print(f"[openuda selftest] Solver '{spec.executable}' OK")
        return
    print(f"[openuda selftest] Solver '{spec.executable}' FAILED", file=sys.stderr)
    sys.exit(2)
