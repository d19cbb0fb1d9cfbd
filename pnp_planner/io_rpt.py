# pnp_planner/io_rpt.py
# Load a KiCad footprint report (.rpt, "File > Fabrication Outputs > Footprint
# Report") into a Board.
#
# Expected shape (only the fields used here):
#   $BOARD
#   upper_left_corner 100.0 50.0
#   lower_right_corner 150.0 80.0
#   $EndBOARD
#   $MODULE "R1"
#   reference "R1"
#   value "10k"
#   footprint "R_0805"
#   attribut smd
#   position 120.0 60.0 orientation 90.00
#   $PAD "1"
#   position -0.95 0.0 size 1.3 1.5 orientation 0.00
#   $EndPAD
#   $EndMODULE R1
#
# Coordinates are taken with y pointing up and made relative to the lower-left
# board corner. Pad positions are offsets from the footprint anchor.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .types import Board, Box, Dimension, Pad, Part, Position


def _unquote(s: str) -> str:
    s = s.strip()
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    return s


def _keyed_floats(tokens: List[str], line_no: int) -> Dict[str, List[float]]:
    """
    'position 1 2 size 3 4 orientation 90' -> {'position': [1, 2], 'size': [3, 4], 'orientation': [90]}
    """
    out: Dict[str, List[float]] = {}
    key: Optional[str] = None
    for tok in tokens:
        try:
            val = float(tok)
        except ValueError:
            key = tok
            out[key] = []
            continue
        if key is None:
            raise ValueError(f"line {line_no}: number without keyword: {' '.join(tokens)}")
        out[key].append(val)
    return out


def _need(values: Dict[str, List[float]], key: str, n: int, line_no: int) -> List[float]:
    v = values.get(key)
    if v is None or len(v) < n:
        raise ValueError(f"line {line_no}: expected '{key}' with {n} number(s)")
    return v


@dataclass
class _ModuleBuilder:
    name: str
    reference: str = ""
    value: str = ""
    footprint: str = ""
    is_smd: bool = True
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0
    pads: List[Pad] = field(default_factory=list)

    def build(self, ox: float, oy: float) -> Part:
        if self.pads:
            x0 = min(p.pos.x - p.size_w / 2 for p in self.pads)
            x1 = max(p.pos.x + p.size_w / 2 for p in self.pads)
            y0 = min(p.pos.y - p.size_h / 2 for p in self.pads)
            y1 = max(p.pos.y + p.size_h / 2 for p in self.pads)
            bbox = Box(Position(x0, y0), Position(x1, y1))
        else:
            bbox = Box()
        return Part(
            component_name=self.reference or self.name,
            footprint=self.footprint,
            value=self.value,
            pos=Position(self.x - ox, self.y - oy),
            angle=self.angle,
            bounding_box=bbox,
            pads=tuple(self.pads),
            is_smd=self.is_smd,
        )


def parse_rpt_lines(lines: Iterable[str]) -> Board:
    """Parse report lines. Raises ValueError on malformed input."""
    corners: List[List[float]] = []
    modules: List[_ModuleBuilder] = []
    current: Optional[_ModuleBuilder] = None
    pad_name: Optional[str] = None

    for line_no, raw in enumerate(lines, start=1):
        tokens = raw.split()
        if not tokens or tokens[0].startswith("#"):
            continue
        head = tokens[0]

        if head in ("upper_left_corner", "lower_right_corner"):
            vals = _keyed_floats(tokens, line_no)
            corners.append(_need(vals, head, 2, line_no))
        elif head == "$MODULE":
            current = _ModuleBuilder(name=_unquote(" ".join(tokens[1:])))
        elif head == "$EndMODULE":
            if current is not None:
                modules.append(current)
            current = None
        elif current is None:
            continue
        elif head == "$PAD":
            pad_name = _unquote(" ".join(tokens[1:]))
        elif head == "$EndPAD":
            pad_name = None
        elif head == "reference":
            current.reference = _unquote(" ".join(tokens[1:]))
        elif head == "value":
            current.value = _unquote(" ".join(tokens[1:]))
        elif head == "footprint":
            current.footprint = _unquote(" ".join(tokens[1:]))
        elif head == "attribut":
            current.is_smd = any(t.lower() == "smd" for t in tokens[1:])
        elif head == "position":
            vals = _keyed_floats(tokens, line_no)
            px, py = _need(vals, "position", 2, line_no)[:2]
            angle = vals.get("orientation", [0.0])
            if pad_name is None:
                current.x, current.y = px, py
                current.angle = angle[0] if angle else 0.0
            else:
                w, h = _need(vals, "size", 2, line_no)[:2]
                current.pads.append(
                    Pad(
                        name=pad_name,
                        pos=Position(px, py),
                        size_w=w,
                        size_h=h,
                        angle=angle[0] if angle else 0.0,
                    )
                )

    if not modules:
        raise ValueError("No footprints found in report")

    if len(corners) >= 2:
        xs = [c[0] for c in corners[:2]]
        ys = [c[1] for c in corners[:2]]
        ox, oy = min(xs), min(ys)
        dim = Dimension(max(xs) - ox, max(ys) - oy)
    else:
        ox = min(m.x for m in modules)
        oy = min(m.y for m in modules)
        dim = Dimension(max(m.x for m in modules) - ox, max(m.y for m in modules) - oy)

    return Board(parts=[m.build(ox, oy) for m in modules], dimension=dim)


def parse_rpt(path: str | Path) -> Board:
    path = Path(path)
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return parse_rpt_lines(f.read().splitlines())
