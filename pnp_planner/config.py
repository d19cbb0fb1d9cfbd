# pnp_planner/config.py
# Centralized defaults and the placement configuration model.
# Keeps "magic numbers" (board thickness, tape defaults, dispense timing) in one place.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .tape import DEFAULT_TAPE_COUNT, Tape
from .types import Part, component_key


@dataclass(frozen=True)
class Defaults:
    # Fallback when only the board top was measured (mm)
    typical_board_thickness: float = 1.6

    # Tapes
    default_tape_count: int = DEFAULT_TAPE_COUNT
    # Relative angle between the footprint as drawn and the part on tape.
    # Empirically 90 for the 0805 parts this was tuned with.
    default_tape_angle: float = 90.0

    # Dispensing: pressure time = initial ms + ms per mm^2 of pad area
    dispense_init_ms: float = 50.0
    dispense_area_ms: float = 25.0

    # Routing optimizer: stop local search after this many improving solutions
    routing_solution_limit: int = 100

    # Machine heights above the relevant surface (mm)
    safe_travel_height: float = 10.0
    dispense_clearance: float = 0.4


DEFAULTS = Defaults()


class ConfigParseError(ValueError):
    """Configuration file could not be turned into a PnPConfig."""

    def __init__(self, message: str, filename: Optional[str] = None, line: Optional[int] = None):
        self.filename = filename
        self.line = line
        if filename is not None and line is not None:
            message = f"{filename}:{line}: {message}"
        elif filename is not None:
            message = f"{filename}: {message}"
        super().__init__(message)


@dataclass
class BoardPlacement:
    """Where the board sits on the machine."""
    origin_x: float = 0.0
    origin_y: float = 0.0
    top: float = 0.0


@dataclass
class PnPConfig:
    board: BoardPlacement = field(default_factory=BoardPlacement)
    # Negative means "not measured yet".
    bed_level: float = -1.0
    # Several keys may point at the same Tape instance.
    tape_for_component: Dict[str, Tape] = field(default_factory=dict)

    def find_tape(self, part: Part) -> Optional[Tape]:
        return self.tape_for_component.get(component_key(part))

    def tapes(self) -> Iterator[Tape]:
        """Each distinct tape once, in declaration order."""
        seen = set()
        for tape in self.tape_for_component.values():
            if id(tape) in seen:
                continue
            seen.add(id(tape))
            yield tape

    def keys_for(self, tape: Tape) -> list:
        return [k for k, t in self.tape_for_component.items() if t is tape]


def create_empty_config() -> PnPConfig:
    """Configuration for runs without a config file (e.g. dispensing only)."""
    return PnPConfig(
        board=BoardPlacement(0.0, 0.0, DEFAULTS.typical_board_thickness),
        bed_level=0.0,
    )
