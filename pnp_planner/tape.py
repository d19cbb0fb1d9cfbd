# pnp_planner/tape.py
# One feeder lane ("tape"): pickup point of the next component, spacing to the
# one after it, the angle components sit at, and how many are left.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_TAPE_COUNT = 1000


@dataclass(eq=False)
class Tape:
    """
    Mutable feeder state. Compared by identity: several component
    identities may share one Tape and must observe the same advances.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    angle: float = 0.0
    slant_angle: float = 0.0
    remaining: int = DEFAULT_TAPE_COUNT

    def set_origin(self, x: float, y: float, z: float) -> None:
        self.x, self.y, self.z = float(x), float(y), float(z)

    def set_spacing(self, dx: float, dy: float) -> None:
        # (0, 0) is rejected by the config parser, not here.
        self.dx, self.dy = float(dx), float(dy)
        self.slant_angle = math.degrees(math.atan2(dy, dx))

    def set_angle(self, angle: float) -> None:
        self.angle = float(angle)

    def set_count(self, n: int) -> None:
        self.remaining = int(n)

    @property
    def height(self) -> float:
        return self.z

    def get_position(self) -> Optional[Tuple[float, float]]:
        """Pickup point of the next component, or None if the tape is depleted."""
        if self.remaining <= 0:
            return None
        return self.x, self.y

    def advance(self) -> bool:
        """Consume one component. Returns False (and changes nothing) when depleted."""
        if self.remaining <= 0:
            return False
        self.x += self.dx
        self.y += self.dy
        self.remaining -= 1
        return True

    def describe(self) -> str:
        return (
            f"origin: ({self.x:.2f}, {self.y:.2f}, {self.z:.2f}) "
            f"delta: ({self.dx:.2f},{self.dy:.2f}) count: {self.remaining}"
        )
