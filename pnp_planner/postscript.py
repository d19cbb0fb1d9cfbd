# pnp_planner/postscript.py
# PostScript "machine": instead of moving anything, draw what would happen.
# Board outline, part boxes and pads, pick -> place moves and the dispense
# path are collected while sequencing and rendered with matplotlib on finish().

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .config import PnPConfig, create_empty_config
from .machine import Machine, check_dimension
from .tape import Tape
from .types import Dimension, Pad, Part, pad_position, rotate


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_path: bool = True
    font_size: int = 5
    padding_mm: float = 5.0
    figsize: Tuple[float, float] = (8.27, 11.69)  # A4 portrait, inches


def _hash_color(key: str) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color from a string."""
    h = 2166136261
    for ch in key.encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    r = 0.3 + ((h >> 0) & 0xFF) / 255 * 0.6
    g = 0.3 + ((h >> 8) & 0xFF) / 255 * 0.6
    b = 0.3 + ((h >> 16) & 0xFF) / 255 * 0.6
    return (r, g, b)


class PostScriptMachine(Machine):
    def __init__(self, out: Optional[BinaryIO] = None, style: Optional[PlotStyle] = None) -> None:
        self.out = out if out is not None else sys.stdout.buffer
        self.style = style or PlotStyle()
        self.config: PnPConfig = create_empty_config()
        self.dimension = Dimension()
        self.title = ""
        self.parts: List[Part] = []
        self.moves: List[Tuple[float, float, float, float]] = []   # pick x,y -> place x,y
        self.dispense_points: List[Tuple[float, float]] = []

    def init(self, config: Optional[PnPConfig], metadata: str, dimension: Dimension) -> bool:
        if not check_dimension(dimension):
            return False
        self.config = config if config is not None else create_empty_config()
        self.dimension = dimension
        self.title = metadata.strip()
        return True

    def _board_xy(self, x: float, y: float) -> Tuple[float, float]:
        return self.config.board.origin_x + x, self.config.board.origin_y + y

    def pick_part(self, part: Part, tape: Optional[Tape]) -> None:
        # Drawn together with the placement.
        pass

    def place_part(self, part: Part, tape: Optional[Tape]) -> None:
        self.parts.append(part)
        pos = tape.get_position() if tape is not None else None
        if pos is None:
            return
        px, py = self._board_xy(part.pos.x, part.pos.y)
        self.moves.append((pos[0], pos[1], px, py))

    def dispense(self, part: Part, pad: Pad) -> None:
        if not self.parts or self.parts[-1] is not part:
            self.parts.append(part)
        p = pad_position(part, pad)
        self.dispense_points.append(self._board_xy(p.x, p.y))

    def _draw_part(self, ax, part: Part) -> None:
        color = _hash_color(f"{part.footprint}@{part.value}")
        cx, cy = self._board_xy(part.pos.x, part.pos.y)
        bb = part.bounding_box
        if bb.width > 0 and bb.height > 0:
            corners = [rotate(x, y, part.angle) for x, y in
                       ((bb.p0.x, bb.p0.y), (bb.p1.x, bb.p0.y), (bb.p1.x, bb.p1.y), (bb.p0.x, bb.p1.y))]
            xs = [cx + c[0] for c in corners]
            ys = [cy + c[1] for c in corners]
            ax.fill(xs, ys, facecolor=color, edgecolor="black", linewidth=0.3, alpha=0.5)
        for pad in part.pads:
            p = pad_position(part, pad)
            x, y = self._board_xy(p.x, p.y)
            w, h = (pad.size_h, pad.size_w) if int(round(part.angle)) % 180 == 90 else (pad.size_w, pad.size_h)
            ax.add_patch(Rectangle((x - w / 2, y - h / 2), w, h, facecolor="0.6", edgecolor="none"))
        if self.style.show_labels:
            ax.text(cx, cy, part.component_name, ha="center", va="center", fontsize=self.style.font_size)

    def finish(self) -> None:
        style = self.style
        fig, ax = plt.subplots(figsize=style.figsize)

        ox, oy = self._board_xy(0, 0)
        ax.add_patch(Rectangle((ox, oy), self.dimension.w, self.dimension.h, fill=False, linewidth=1.0))

        seen = set()
        for part in self.parts:
            if id(part) in seen:
                continue
            seen.add(id(part))
            self._draw_part(ax, part)

        if style.show_path:
            for x0, y0, x1, y1 in self.moves:
                ax.plot([x0, x1], [y0, y1], linewidth=0.3, color="tab:blue")
                ax.plot([x0], [y0], marker="o", markersize=1.5, color="tab:blue")
            if self.dispense_points:
                xs = [p[0] for p in self.dispense_points]
                ys = [p[1] for p in self.dispense_points]
                ax.plot(xs, ys, linewidth=0.3, color="tab:red")

        ax.set_title(self.title, fontsize=6)
        ax.set_aspect("equal", adjustable="datalim")
        ax.margins(style.padding_mm / max(self.dimension.w, self.dimension.h, 1.0))
        ax.tick_params(labelsize=5)

        fig.savefig(self.out, format="ps")
        plt.close(fig)
        self.out.flush()
