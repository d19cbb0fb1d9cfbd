# pnp_planner/templates.py
# Text emitters over a parsed board:
# - create_config_template: rich-format config to fill in by hand (-t)
# - create_list: <footprint>@<value> and how often it is used (-l)
# - create_homer_instruction: what to probe for the measured format (-H)

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .logger import get_logger
from .sequence import find_part_closest_to
from .types import Board, Part, Position, component_key

ComponentCount = Dict[str, int]


def extract_components(parts: Sequence[Part]) -> Tuple[ComponentCount, int]:
    """Count parts per component key. Returns (counts, total)."""
    counts: ComponentCount = {}
    for part in parts:
        key = component_key(part)
        counts[key] = counts.get(key, 0) + 1
    return counts, len(parts)


def create_config_template(board: Board) -> str:
    origin_x, origin_y = 10, 10
    out: List[str] = [
        "Board:",
        f"origin: {origin_x:.0f} {origin_y:.0f} 1.6 # x/y/z origin of the board; (z=thickness).",
        "",
        "# Where the tray with all the tapes start.",
        f"Tape-Tray-Origin: 0 {origin_y + board.dimension.h:.1f} 0",
        "",
        "# This template provides one <footprint>@<component> per tape,",
        "# but if you have multiple components that are indeed the same",
        "# e.g. smd0805@100n smd0805@0.1uF, then you can just put them",
        "# space delimited behind each Tape:",
        "#   Tape: smd0805@100n smd0805@0.1uF",
        "# Each Tape section requires",
        "#   'origin:', which is the (x/y/z) position (relative to Tape-Tray-Origin) of",
        "# the top of the first component (z: pick-up-height).",
        "# And",
        "#   'spacing:', (dx,dy) to the next one",
        "#",
        "# Also there are the following optional parameters",
        "#angle: 0     # Optional: Default rotation of component on tape.",
        "#count: 1000  # Optional: available count on tape",
        "",
    ]

    counts, total = extract_components(board.parts)
    ypos = 0
    for part in board.parts:
        key = component_key(part)
        if key not in counts:
            continue  # already written
        width = int(part.bounding_box.width) + 5
        height = int(part.bounding_box.height)
        out.append("")
        out.append(f"Tape: {key}")
        out.append(f"count: {counts.pop(key)}")
        out.append(f"origin:  {10 + height // 2} {ypos + width // 2} 2 # fill me")
        out.append(f"spacing: {4 if height < 4 else height + 2} 0   # fill me")
        ypos += width

    get_logger().info(f"{total} components total")
    return "\n".join(out) + "\n"


def create_list(parts: Sequence[Part]) -> str:
    counts, total = extract_components(parts)
    longest = max((len(k) for k in counts), default=0)
    lines = [f"{key:<{longest}} {counts[key]:4d}" for key in sorted(counts)]
    get_logger().info(f"{total} components total")
    return "".join(line + "\n" for line in lines)


def create_homer_instruction(board: Board) -> str:
    lines = ["bedlevel:BedLevel-Z\tTouch needle on bed next to board"]
    counts, _ = extract_components(board.parts)
    for key in sorted(counts):
        lines.append(f"tape1:{key}\tfind first component")
        next_pos = min(max(2, counts[key]), 4)
        lines.append(f"tape{next_pos}:{key}\tfind {next_pos}. component")

    part = find_part_closest_to(board.parts, Position(0, 0))
    if part is not None:
        lines.append(f"board:{part.component_name}\tfind component center on board (bottom left)")
    part = find_part_closest_to(board.parts, Position(board.dimension.w, board.dimension.h))
    if part is not None:
        lines.append(f"board:{part.component_name}\tfind component center on board (top right)")
    return "".join(line + "\n" for line in lines)
