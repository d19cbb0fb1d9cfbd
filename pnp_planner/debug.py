# pnp_planner/debug.py
# Debug / inspection helpers:
# - dump a parsed configuration (tapes with all their aliases)
# - dump the placement order with resolved pickup heights

from __future__ import annotations

from typing import List, Optional, Sequence

from .config import PnPConfig
from .sequence import pickup_height, sort_parts_for_placement
from .types import Part, component_key


def format_config(config: PnPConfig) -> List[str]:
    b = config.board
    lines = [
        f"Board origin: ({b.origin_x:.2f}, {b.origin_y:.2f}) top: {b.top:.2f}",
        f"Bed level: {config.bed_level:.2f}",
    ]
    for tape in config.tapes():
        keys = " ".join(config.keys_for(tape))
        lines.append(f"Tape {keys}: {tape.describe()} angle: {tape.angle:.1f} slant: {tape.slant_angle:.1f}")
    return lines


def format_placement_order(parts: Sequence[Part], config: Optional[PnPConfig]) -> List[str]:
    lines = []
    for i, part in enumerate(sort_parts_for_placement(parts, config), start=1):
        z = pickup_height(config, part) if config is not None else None
        h = "     -" if z is None else f"{z:6.2f}"
        lines.append(f"{i:4d} {part.component_name:10s} z={h} {component_key(part)}")
    return lines
