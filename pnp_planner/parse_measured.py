# pnp_planner/parse_measured.py
# Parser for the reduced configuration written by the calibration ("homer")
# assistant from physically probed positions. One measurement per line:
#
#   bedlevel:BedLevel-Z  x y z
#   tape1:R_0805@10k     x y z     first component on that tape
#   tape4:R_0805@10k     x y z     fourth component: spacing = delta / 3
#   board:R12            x y z     center of part R12 on the board
#
# The file is machine generated and may contain noise; lines that do not
# match are reported and skipped. Only the final height cross-check aborts.

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Tuple

from .config import DEFAULTS, ConfigParseError, PnPConfig
from .logger import get_logger
from .tape import Tape
from .types import Board
from .validate import check_heights

_NUM = r"([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
_XYZ = rf"\s+{_NUM}\s+{_NUM}\s+{_NUM}"

TAPE_RE = re.compile(rf"^tape([-+]?\d+):\s*(\S+){_XYZ}")
BOARD_RE = re.compile(rf"^board:\s*(\S+){_XYZ}")
BEDLEVEL_RE = re.compile(rf"^bedlevel:\s*(\S+){_XYZ}")


def _xyz(m: re.Match, first: int) -> Tuple[float, float, float]:
    return float(m.group(first)), float(m.group(first + 1)), float(m.group(first + 2))


class _MeasuredParser:
    def __init__(self, board: Board, filename: str) -> None:
        self.board = board
        self.filename = filename
        self.config = PnPConfig()
        self.board_measured = False
        # First measured position per tape; origin stays there while parsing.
        self.first_pos = {}

    def feed(self, line_no: int, raw: str) -> None:
        line = raw.strip()
        if not line or line.startswith("#"):
            return
        log = get_logger()

        m = TAPE_RE.match(line)
        if m:
            idx = int(m.group(1))
            designator = m.group(2)
            x, y, z = _xyz(m, 3)
            if idx < 1:
                log.warn(f"{self.filename}:{line_no}: Couldn't parse '{line}'")
            elif idx == 1:
                self._new_tape(designator, x, y, z)
            else:
                self._infer_spacing(line_no, designator, idx, x, y)
            return

        m = BOARD_RE.match(line)
        if m:
            self._board_reference(m.group(1), *_xyz(m, 2))
            return

        m = BEDLEVEL_RE.match(line)
        if m:
            # designator is informational only
            self.config.bed_level = float(m.group(4))
            return

        log.warn(f"{self.filename}:{line_no}: Couldn't parse '{line}'")

    def _new_tape(self, designator: str, x: float, y: float, z: float) -> None:
        tape = Tape()
        tape.set_angle(DEFAULTS.default_tape_angle)
        tape.set_origin(x, y, z)
        self.config.tape_for_component[designator] = tape
        self.first_pos[designator] = (x, y)

    def _infer_spacing(self, line_no: int, designator: str, idx: int, x: float, y: float) -> None:
        log = get_logger()
        tape = self.config.tape_for_component.get(designator)
        if tape is None:
            log.warn(f"{self.filename}:{line_no}: tape{idx}:{designator} before tape1:{designator}; ignored")
            return
        advances = idx - 1
        x0, y0 = self.first_pos[designator]
        dx = (x - x0) / advances
        dy = (y - y0) / advances
        tape.set_spacing(dx, dy)
        log.info(f"Δ={(dx * dx + dy * dy) ** 0.5:.2f}mm ∡={tape.angle:5.1f}° {designator}")

    def _board_reference(self, designator: str, x: float, y: float, z: float) -> None:
        part = self.board.find_part(designator)
        if part is not None:
            self.config.board.origin_x = x - part.pos.x
            self.config.board.origin_y = y - part.pos.y
        else:
            get_logger().warn(f"{self.filename}: Trouble finding '{designator}' on board")
        self.config.board.top = z
        self.board_measured = True
        if self.config.bed_level < 0:
            self.config.bed_level = self.config.board.top - DEFAULTS.typical_board_thickness


def parse_measured_lines(board: Board, lines: Iterable[str], filename: str = "<measured>") -> PnPConfig:
    """Parse measured-format lines against `board`. Raises ConfigParseError on the height cross-check."""
    parser = _MeasuredParser(board, filename)
    for line_no, raw in enumerate(lines, start=1):
        parser.feed(line_no, raw)

    config = parser.config
    check_heights(config, filename=filename, include_board_top=parser.board_measured)
    return config


def parse_measured_config(board: Board, path: str | Path) -> PnPConfig:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise ConfigParseError(f"Can't open: {e.strerror}", filename=str(path)) from e
    return parse_measured_lines(board, lines, filename=str(path))
