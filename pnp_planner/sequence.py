# pnp_planner/sequence.py
# Turns a board + optional configuration into the ordered machine operations.
#
# Pick'n place: lowest pickup height first so the head does not knock over
# taller neighbours that are already placed; parts without a tape go first.
# Dispensing: every pad once, in the order the travel optimizer returns.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .config import PnPConfig
from .logger import get_logger
from .machine import Machine
from .optimize import OptimizeItem, optimize_parts
from .types import Board, Part, Position, component_key, distance


class DepletionPolicy(Enum):
    WARN = "warn"       # log and keep going; the operator refills
    STRICT = "strict"   # stop the run


class FeederDepletedError(RuntimeError):
    def __init__(self, part: Part, keys: List[str]):
        self.part = part
        self.keys = keys
        super().__init__(f"Tape for {' '.join(keys)} is empty while placing {part.component_name}")


@dataclass
class SequenceResult:
    # component names, in placement order
    placed: List[str] = field(default_factory=list)   # taken from a tape
    no_tape: List[str] = field(default_factory=list)
    depleted: List[str] = field(default_factory=list)


def pickup_height(config: PnPConfig, part: Part) -> Optional[float]:
    tape = config.find_tape(part)
    return None if tape is None else tape.height


def _placement_key(config: PnPConfig, part: Part):
    # Unmapped parts first regardless of how low the tapes sit.
    h = pickup_height(config, part)
    return (h is not None, 0.0 if h is None else h, part.component_name)


def sort_parts_for_placement(parts: Sequence[Part], config: Optional[PnPConfig]) -> List[Part]:
    """Board order without a config; otherwise unmapped parts, then by (pickup height, component name)."""
    if config is None:
        return list(parts)
    return sorted(parts, key=lambda p: _placement_key(config, p))


def pick_n_place(
    config: Optional[PnPConfig],
    board: Board,
    machine: Machine,
    *,
    depletion: DepletionPolicy = DepletionPolicy.WARN,
) -> SequenceResult:
    log = get_logger()
    result = SequenceResult()

    for part in sort_parts_for_placement(board.parts, config):
        tape = None
        if config is not None:
            tape = config.find_tape(part)
            if tape is None:
                log.warn(f"No tape for '{part.component_name}' ({component_key(part)})")
                result.no_tape.append(part.component_name)

        if tape is not None and tape.get_position() is None:
            keys = config.keys_for(tape)
            if depletion is DepletionPolicy.STRICT:
                raise FeederDepletedError(part, keys)
            log.warn(f"Tape for {' '.join(keys)} is empty; '{part.component_name}' gets no component")
            result.depleted.append(part.component_name)

        machine.pick_part(part, tape)
        machine.place_part(part, tape)
        if tape is not None and tape.advance():
            result.placed.append(part.component_name)

    return result


def collect_pads(board: Board) -> List[OptimizeItem]:
    return [(part, pad) for part in board.parts for pad in part.pads]


def solder_dispense(
    board: Board,
    machine: Machine,
    *,
    optimizer: Callable[[Sequence[OptimizeItem]], List[OptimizeItem]] = optimize_parts,
) -> List[OptimizeItem]:
    """Dispense on every pad; returns the order used."""
    ordered = optimizer(collect_pads(board))
    for part, pad in ordered:
        machine.dispense(part, pad)
    return ordered


def find_part_closest_to(parts: Sequence[Part], pos: Position) -> Optional[Part]:
    """Part whose center is nearest to pos; first one wins on ties."""
    result: Optional[Part] = None
    closest = -1.0
    for part in parts:
        dist = distance(part.pos, pos)
        if closest < 0 or dist < closest:
            result = part
            closest = dist
    return result
