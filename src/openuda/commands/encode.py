"""openuda encode command: print the NEC-2 deck for a design."""

from __future__ import annotations

import argparse
from pathlib import Path


def cmd_encode(args: argparse.Namespace) -> None:
    """Write the NEC card deck for the configured design."""
    from openuda.commands._common import load_target
    from openuda.nec.encoder import encode

    _, description = load_target(args)
    deck = encode(description)

    if args.output:
        out = Path(args.output)
        out.write_text(deck)
        print(f"[openuda encode] NEC deck written to: {out}")
    else:
        print(deck, end="")
