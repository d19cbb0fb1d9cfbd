# pnp_planner/types.py
# Board-side data structures: positions, pads, parts and the board itself.
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


# ----------------------------
# Geometry
# ----------------------------

@dataclass(frozen=True)
class Position:
    """A point in millimeters."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


def distance(a: Position, b: Position) -> float:
    """Planar (x/y) distance; z is ignored."""
    return math.hypot(a.x - b.x, a.y - b.y)


@dataclass(frozen=True)
class Box:
    """Axis aligned box given by two corners."""
    p0: Position = field(default_factory=Position)
    p1: Position = field(default_factory=Position)

    @property
    def width(self) -> float:
        return abs(self.p1.x - self.p0.x)

    @property
    def height(self) -> float:
        return abs(self.p1.y - self.p0.y)


@dataclass(frozen=True)
class Dimension:
    w: float = 0.0
    h: float = 0.0


def rotate(dx: float, dy: float, angle_deg: float) -> Tuple[float, float]:
    a = math.radians(angle_deg)
    c, s = math.cos(a), math.sin(a)
    return dx * c - dy * s, dx * s + dy * c


# ----------------------------
# Parts
# ----------------------------

@dataclass(frozen=True)
class Pad:
    """A solder pad; pos is the offset from the part center (unrotated)."""
    name: str
    pos: Position
    size_w: float
    size_h: float
    angle: float = 0.0

    @property
    def area(self) -> float:
        return self.size_w * self.size_h


@dataclass(frozen=True)
class Part:
    """
    One placed component as found in the placement report.
    pos is the board relative center, angle in degrees.
    """
    component_name: str   # reference designator, e.g. "R12"
    footprint: str
    value: str
    pos: Position
    angle: float = 0.0
    bounding_box: Box = field(default_factory=Box)
    pads: Tuple[Pad, ...] = ()
    is_smd: bool = True


def component_key(part: Part) -> str:
    """Identity of an interchangeable part class, e.g. 'R_0805@10k'."""
    return f"{part.footprint}@{part.value}"


def pad_position(part: Part, pad: Pad) -> Position:
    """Pad center in board coordinates."""
    dx, dy = rotate(pad.pos.x, pad.pos.y, part.angle)
    return Position(part.pos.x + dx, part.pos.y + dy, part.pos.z)


@dataclass
class Board:
    """Parts in report order plus the board size."""
    parts: List[Part] = field(default_factory=list)
    dimension: Dimension = field(default_factory=Dimension)

    def find_part(self, component_name: str) -> Optional[Part]:
        for part in self.parts:
            if part.component_name == component_name:
                return part
        return None
