"""OpenUda command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys


def cmd_init(args: argparse.Namespace) -> None:
    """Scaffold a new OpenUda project."""
    from openuda.commands.init import cmd_init as _init

    _init(args)


def cmd_presets(args: argparse.Namespace) -> None:
    """List built-in antenna presets."""
    from openuda.commands.presets import cmd_presets as _presets

    _presets(args)


def cmd_encode(args: argparse.Namespace) -> None:
    """Print the NEC-2 deck for a design."""
    from openuda.commands.encode import cmd_encode as _encode

    _encode(args)


def cmd_simulate(args: argparse.Namespace) -> None:
    """Simulate one design."""
    from openuda.commands.simulate import cmd_simulate as _simulate

    _simulate(args)


def cmd_optimize(args: argparse.Namespace) -> None:
    """Run the genetic optimizer."""
    from openuda.commands.optimize import cmd_optimize as _optimize

    _optimize(args)


def cmd_report(args: argparse.Namespace) -> None:
    """Generate a report from a run bundle."""
    from openuda.commands.report import cmd_report as _report

    _report(args)


def cmd_selftest(args: argparse.Namespace) -> None:
    """Check the solver with a reference dipole."""
    from openuda.commands.selftest import cmd_selftest as _selftest

    _selftest(args)


def cmd_mcp_serve(args: argparse.Namespace) -> None:
    """Start the OpenUda MCP server."""
    from openuda.commands.mcp_serve import cmd_mcp_serve as _serve

    _serve(args)


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default="openuda.yaml", help="Config file path")
    parser.add_argument("--preset", default=None, help="Use a built-in preset instead of the config design")


def build_parser() -> argparse.ArgumentParser:
    """Build the OpenUda argument parser."""
    parser = argparse.ArgumentParser(
        prog="openuda",
        description="OpenUda — Yagi-Uda antenna simulation and optimization with NEC-2",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {_get_version()}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    p_init = subparsers.add_parser("init", help="Scaffold a new OpenUda project")
    p_init.add_argument("--name", default="my_yagi", help="Project name")
    p_init.add_argument("--dir", default=".", help="Directory to create project in")
    p_init.add_argument("--preset", default="2m-amateur-5el", help="Starting preset")
    p_init.add_argument(
        "--objective", choices=["gain", "fbRatio", "balanced"], default="gain",
        help="Optimization objective",
    )
    p_init.set_defaults(func=cmd_init)

    # presets
    p_presets = subparsers.add_parser("presets", help="List built-in antenna presets")
    p_presets.add_argument("--id", default=None, help="Show the elements of one preset")
    p_presets.add_argument(
        "--category", choices=["beginner", "intermediate", "advanced", "experimental"],
        default=None, help="Filter by category",
    )
    p_presets.set_defaults(func=cmd_presets)

    # encode
    p_encode = subparsers.add_parser("encode", help="Print the NEC-2 deck for a design")
    _add_target_args(p_encode)
    p_encode.add_argument("--output", "-o", default=None, help="Write the deck to a file")
    p_encode.set_defaults(func=cmd_encode)

    # simulate
    p_sim = subparsers.add_parser("simulate", help="Simulate a design")
    _add_target_args(p_sim)
    p_sim.set_defaults(func=cmd_simulate)

    # optimize
    p_opt = subparsers.add_parser("optimize", help="Optimize a design with a genetic algorithm")
    _add_target_args(p_opt)
    p_opt.add_argument("--objective", choices=["gain", "fbRatio", "balanced"], default=None)
    p_opt.add_argument("--generations", type=int, default=None)
    p_opt.add_argument("--population", type=int, default=None)
    p_opt.add_argument("--seed", type=int, default=None)
    p_opt.add_argument(
        "--stop-file", default=None,
        help="Stop at the next generation boundary once this file exists",
    )
    p_opt.set_defaults(func=cmd_optimize)

    # report
    p_report = subparsers.add_parser("report", help="Generate report from run bundle")
    p_report.add_argument("run_id", help="Run ID to generate report for")
    p_report.add_argument("--config", default="openuda.yaml", help="Config file path")
    p_report.set_defaults(func=cmd_report)

    # selftest
    p_self = subparsers.add_parser("selftest", help="Check that the NEC-2 solver works")
    p_self.add_argument("--config", default="openuda.yaml", help="Config file path")
    p_self.add_argument("--executable", default=None, help="Solver executable to test")
    p_self.set_defaults(func=cmd_selftest)

    # mcp serve
    p_mcp = subparsers.add_parser("mcp", help="MCP server commands")
    mcp_sub = p_mcp.add_subparsers(dest="mcp_command")
    p_serve = mcp_sub.add_parser("serve", help="Start the MCP server")
    p_serve.add_argument("--config", default="openuda.yaml", help="Config file path")
    p_serve.add_argument(
        "--transport", choices=["stdio", "http"], default="stdio", help="Transport mode"
    )
    p_serve.set_defaults(func=cmd_mcp_serve)

    return parser


def _get_version() -> str:
    from openuda import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        logging.getLogger(__name__).exception("Command failed")
        print(f"\nerror: {e}", file=sys.stderr)
        sys.exit(1)
