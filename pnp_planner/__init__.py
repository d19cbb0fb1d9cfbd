# pnp_planner/__init__.py
"""
pnp_planner: pick'n place and solder paste dispensing planner.

Reads a KiCad footprint report, an optional tape configuration (hand written
or measured with the calibration assistant) and emits machine operations:
- pick'n place ordered by tape pickup height (lowest first)
- solder paste dispensing in an OR-Tools optimized travel order
- G-code text or a matplotlib PostScript preview
"""

from .types import (
    Position,
    Box,
    Dimension,
    Pad,
    Part,
    Board,
    component_key,
    distance,
    pad_position,
)

from .tape import Tape

from .config import (
    Defaults,
    DEFAULTS,
    BoardPlacement,
    PnPConfig,
    ConfigParseError,
    create_empty_config,
)

from .parse_config import parse_config, parse_config_lines
from .parse_measured import parse_measured_config, parse_measured_lines
from .io_rpt import parse_rpt, parse_rpt_lines

from .optimize import optimize_parts, path_length

from .sequence import (
    DepletionPolicy,
    FeederDepletedError,
    SequenceResult,
    sort_parts_for_placement,
    pick_n_place,
    collect_pads,
    solder_dispense,
    find_part_closest_to,
)

from .machine import Machine, GCodeMachine, GCodeParams
from .postscript import PostScriptMachine, PlotStyle

__all__ = [
    # types
    "Position",
    "Box",
    "Dimension",
    "Pad",
    "Part",
    "Board",
    "component_key",
    "distance",
    "pad_position",
    "Tape",
    # config
    "Defaults",
    "DEFAULTS",
    "BoardPlacement",
    "PnPConfig",
    "ConfigParseError",
    "create_empty_config",
    # parsers
    "parse_config",
    "parse_config_lines",
    "parse_measured_config",
    "parse_measured_lines",
    "parse_rpt",
    "parse_rpt_lines",
    # sequencing
    "optimize_parts",
    "path_length",
    "DepletionPolicy",
    "FeederDepletedError",
    "SequenceResult",
    "sort_parts_for_placement",
    "pick_n_place",
    "collect_pads",
    "solder_dispense",
    "find_part_closest_to",
    # machines
    "Machine",
    "GCodeMachine",
    "GCodeParams",
    "PostScriptMachine",
    "PlotStyle",
]
