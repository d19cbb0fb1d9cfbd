# pnp_planner/cli.py
# Command line front end.
#
# Run:
#   python -m pnp_planner -l board.rpt                      # component list
#   python -m pnp_planner -t board.rpt > board.config       # config template
#   python -m pnp_planner -H board.rpt > homer.txt          # calibration instructions
#   python -m pnp_planner -p -c board.config board.rpt > pnp.gcode
#   python -m pnp_planner -p -C measured.txt board.rpt > pnp.gcode
#   python -m pnp_planner -d -D 50,25 board.rpt > paste.gcode
#   python -m pnp_planner -d -P board.rpt > paste.ps        # PostScript preview
#
# Exit status: 0 on success, 1 on any parse or initialization failure.

from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from typing import List, Optional, Tuple

from .config import DEFAULTS, ConfigParseError, PnPConfig
from .debug import format_config, format_placement_order
from .io_rpt import parse_rpt
from .logger import get_logger, reset_warnings, set_enabled
from .machine import GCodeMachine, GCodeParams, Machine
from .optimize import METHODS, optimize_parts
from .parse_config import parse_config
from .parse_measured import parse_measured_config
from .postscript import PostScriptMachine
from .sequence import DepletionPolicy, FeederDepletedError, pick_n_place, solder_dispense
from .templates import create_config_template, create_homer_instruction, create_list
from .types import Board


def _parse_dispense_timing(s: str) -> Tuple[float, float]:
    vals = [v.strip() for v in s.split(",")]
    if len(vals) != 2:
        raise argparse.ArgumentTypeError("Invalid -D value, expected <init-ms>,<area-to-ms>")
    try:
        return float(vals[0]), float(vals[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid -D value: {s}") from None


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pnp_planner",
        description="Pick'n place and solder paste dispensing from a KiCad footprint report.",
    )
    op = p.add_argument_group("operations").add_mutually_exclusive_group()
    op.add_argument("-l", dest="op", action="store_const", const="list",
                    help="List found <footprint>@<value> <count> to stdout")
    op.add_argument("-t", dest="op", action="store_const", const="template",
                    help="Create human-editable config template to stdout")
    op.add_argument("-H", dest="op", action="store_const", const="homer",
                    help="Create homer (measurement) instructions to stdout")
    op.add_argument("-d", dest="op", action="store_const", const="dispense", help="Dispense solder paste")
    op.add_argument("-p", dest="op", action="store_const", const="pnp", help="Pick'n place")

    cfg = p.add_argument_group("configuration").add_mutually_exclusive_group()
    cfg.add_argument("-c", dest="config", metavar="CONFIG", help="Read a config created from -t")
    cfg.add_argument("-C", dest="measured", metavar="CONFIG", help="Read a measured config created via -H")

    p.add_argument("-D", dest="dispense_timing", type=_parse_dispense_timing,
                   default=(DEFAULTS.dispense_init_ms, DEFAULTS.dispense_area_ms), metavar="INIT_MS,AREA_MS",
                   help="Milliseconds to leave pressure on: initial offset, and per mm^2 of pad area")
    p.add_argument("-P", dest="postscript", action="store_true", help="Output PostScript instead of G-code")
    p.add_argument("--out", type=str, default="", help="Write machine output to this file instead of stdout")
    p.add_argument("--optimizer", choices=METHODS, default="routing", help="Dispense travel optimizer")
    p.add_argument("--strict-stock", action="store_true", help="Abort when a tape runs out of components")
    p.add_argument("-v", "--verbose", action="store_true", help="Dump parsed config and placement order to stderr")
    p.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    p.add_argument("rpt", help="KiCad footprint report (.rpt)")
    return p


def _load_config(args: argparse.Namespace, board: Board) -> Optional[PnPConfig]:
    if args.config:
        return parse_config(args.config)
    if args.measured:
        return parse_measured_config(board, args.measured)
    return None


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    args = build_argparser().parse_args(argv)
    set_enabled(not args.quiet)
    reset_warnings()
    log = get_logger()

    try:
        board = parse_rpt(args.rpt)
    except (OSError, ValueError) as e:
        log.error(f"{args.rpt}: {e}")
        return 1
    log.info(f"Board: {args.rpt}, {board.dimension.w:.1f}mm x {board.dimension.h:.1f}mm")

    text_ops = {
        "template": lambda: create_config_template(board),
        "list": lambda: create_list(board.parts),
        "homer": lambda: create_homer_instruction(board),
    }
    if args.op in text_ops:
        sys.stdout.write(text_ops[args.op]())
        return 0

    if args.op is None:
        log.error("Please choose operation with -d or -p")
        return 1

    try:
        config = _load_config(args, board)
    except ConfigParseError as e:
        log.error(str(e))
        return 1

    if args.verbose:
        if config is not None:
            for line in format_config(config):
                log.info(line)
        if args.op == "pnp":
            for line in format_placement_order(board.parts, config):
                log.info(line)

    with ExitStack() as stack:
        machine: Machine
        if args.postscript:
            out = stack.enter_context(open(args.out, "wb")) if args.out else sys.stdout.buffer
            machine = PostScriptMachine(out)
        else:
            out = stack.enter_context(open(args.out, "w", encoding="utf-8")) if args.out else sys.stdout
            init_ms, area_ms = args.dispense_timing
            machine = GCodeMachine(out, GCodeParams(dispense_init_ms=init_ms, dispense_area_ms=area_ms))

        metadata = " ".join(["pnp_planner"] + argv)
        if not machine.init(config, metadata, board.dimension):
            log.error("Initialization failed")
            return 1

        if args.op == "dispense":
            solder_dispense(board, machine, optimizer=lambda items: optimize_parts(items, method=args.optimizer))
        else:
            policy = DepletionPolicy.STRICT if args.strict_stock else DepletionPolicy.WARN
            try:
                pick_n_place(config, board, machine, depletion=policy)
            except FeederDepletedError as e:
                log.error(str(e))
                return 1

        machine.finish()

    warnings = reset_warnings()
    if warnings:
        log.info(f"Done with {warnings} warning(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
