# pnp_planner/machine.py
# Machine sinks receive the ordered operation stream from the sequencing code.
# GCodeMachine writes plain G-code text; the PostScript preview lives in
# postscript.py.

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TextIO

from .config import DEFAULTS, PnPConfig, create_empty_config
from .logger import get_logger
from .tape import Tape
from .types import Dimension, Pad, Part, pad_position


class Machine(ABC):
    """Operations the sequencing engine drives, in call order: init, pick/place or dispense, finish."""

    @abstractmethod
    def init(self, config: Optional[PnPConfig], metadata: str, dimension: Dimension) -> bool:
        ...

    @abstractmethod
    def pick_part(self, part: Part, tape: Optional[Tape]) -> None:
        ...

    @abstractmethod
    def place_part(self, part: Part, tape: Optional[Tape]) -> None:
        ...

    @abstractmethod
    def dispense(self, part: Part, pad: Pad) -> None:
        ...

    @abstractmethod
    def finish(self) -> None:
        ...


def check_dimension(dimension: Dimension) -> bool:
    if dimension.w <= 0 or dimension.h <= 0:
        get_logger().error(f"Board has no usable size: {dimension.w:.1f}mm x {dimension.h:.1f}mm")
        return False
    return True


@dataclass(frozen=True)
class GCodeParams:
    dispense_init_ms: float = DEFAULTS.dispense_init_ms
    dispense_area_ms: float = DEFAULTS.dispense_area_ms
    safe_height: float = DEFAULTS.safe_travel_height
    dispense_clearance: float = DEFAULTS.dispense_clearance
    travel_feed: int = 6000   # mm/min
    z_feed: int = 1000

    def dispense_ms(self, pad: Pad) -> float:
        return self.dispense_init_ms + pad.area * self.dispense_area_ms


class GCodeMachine(Machine):
    def __init__(self, out: Optional[TextIO] = None, params: Optional[GCodeParams] = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.params = params or GCodeParams()
        self.config: PnPConfig = create_empty_config()

    def _w(self, line: str) -> None:
        self.out.write(line + "\n")

    def _travel(self, x: float, y: float) -> None:
        p = self.params
        self._w(f"G0 Z{self.config.board.top + p.safe_height:.3f} F{p.z_feed}")
        self._w(f"G0 X{x:.3f} Y{y:.3f} F{p.travel_feed}")

    def _down(self, z: float) -> None:
        self._w(f"G1 Z{z:.3f} F{self.params.z_feed}")

    def _up(self) -> None:
        self._w(f"G0 Z{self.config.board.top + self.params.safe_height:.3f} F{self.params.z_feed}")

    def init(self, config: Optional[PnPConfig], metadata: str, dimension: Dimension) -> bool:
        if not check_dimension(dimension):
            return False
        self.config = config if config is not None else create_empty_config()
        self._w(f"; {metadata.strip()}")
        self._w(f"; Board: {dimension.w:.1f}mm x {dimension.h:.1f}mm")
        self._w(
            f"; origin: ({self.config.board.origin_x:.2f}, {self.config.board.origin_y:.2f}) "
            f"top: {self.config.board.top:.2f} bed-level: {self.config.bed_level:.2f}"
        )
        self._w("G21 ; mm")
        self._w("G90 ; absolute")
        self._w("G28 ; home")
        return True

    def pick_part(self, part: Part, tape: Optional[Tape]) -> None:
        self._w(f"; pick {part.component_name} ({part.footprint}@{part.value})")
        pos = tape.get_position() if tape is not None else None
        if pos is None:
            self._w(f"; no component available for {part.component_name}")
            return
        self._travel(pos[0], pos[1])
        self._down(tape.height)
        self._w("M42 P1 S255 ; vacuum on")
        self._w("G4 P100")
        self._up()

    def place_part(self, part: Part, tape: Optional[Tape]) -> None:
        if tape is None or tape.get_position() is None:
            self._w(f"; skip placing {part.component_name}: nothing picked")
            return
        b = self.config.board
        self._travel(b.origin_x + part.pos.x, b.origin_y + part.pos.y)
        self._w(f"G0 A{part.angle - tape.angle:.1f}")
        self._down(b.top)
        self._w("M42 P1 S0 ; vacuum off")
        self._w("G4 P100")
        self._up()

    def dispense(self, part: Part, pad: Pad) -> None:
        b = self.config.board
        pos = pad_position(part, pad)
        self._w(f"; {part.component_name}.{pad.name}")
        self._travel(b.origin_x + pos.x, b.origin_y + pos.y)
        self._down(b.top + self.params.dispense_clearance)
        self._w("M106 ; pressure on")
        self._w(f"G4 P{self.params.dispense_ms(pad):.0f}")
        self._w("M107 ; pressure off")
        self._up()

    def finish(self) -> None:
        self._up()
        self._w("G0 X0 Y0")
        self._w("M84 ; motors off")
        self.out.flush()
