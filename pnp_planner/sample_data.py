# pnp_planner/sample_data.py
# Small hand-made boards and config texts for tests and quick experiments.

from __future__ import annotations

from typing import List, Sequence, Tuple

from .types import Board, Box, Dimension, Pad, Part, Position


def two_pad_part(
    name: str,
    footprint: str,
    value: str,
    x: float,
    y: float,
    angle: float = 0.0,
    pitch: float = 1.9,
    pad: Tuple[float, float] = (1.3, 1.5),
) -> Part:
    """A chip component (resistor/capacitor style) with two pads along x."""
    w, h = pad
    pads = (
        Pad("1", Position(-pitch / 2, 0), w, h),
        Pad("2", Position(pitch / 2, 0), w, h),
    )
    bbox = Box(Position(-pitch / 2 - w / 2, -h / 2), Position(pitch / 2 + w / 2, h / 2))
    return Part(
        component_name=name,
        footprint=footprint,
        value=value,
        pos=Position(x, y),
        angle=angle,
        bounding_box=bbox,
        pads=pads,
    )


def sample_board() -> Board:
    parts: List[Part] = [
        two_pad_part("R1", "R_0805", "10k", 5, 5),
        two_pad_part("C1", "C_0805", "100n", 20, 5, angle=90),
        two_pad_part("R2", "R_0805", "10k", 35, 5),
        two_pad_part("C2", "C_1206", "10u", 20, 20, pitch=3.0, pad=(1.6, 1.8)),
        two_pad_part("D1", "LED_0805", "red", 35, 20),
    ]
    return Board(parts=parts, dimension=Dimension(40, 25))


def board_from(parts: Sequence[Part], w: float = 50, h: float = 50) -> Board:
    return Board(parts=list(parts), dimension=Dimension(w, h))


SAMPLE_CONFIG = """\
Board:
origin: 100 50 1.6

Tape-Tray-Origin: 0 100 0

Tape: R_0805@10k
count: 10
origin: 10 5 2
spacing: 4 0

Tape: C_0805@100n C_0805@0.1uF
origin: 10 15 1.5
spacing: 4 0
angle: 0

Tape: C_1206@10u
origin: 10 25 3
spacing: 4 0
count: 1
"""


SAMPLE_MEASURED = """\
bedlevel:BedLevel-Z 0 0 0.5
tape1:R_0805@10k 10 100 2.0
tape4:R_0805@10k 22 100 2.0
tape1:C_0805@100n 10 110 1.5
tape2:C_0805@100n 10 114 1.5
board:R1 105 55 1.6
"""


SAMPLE_RPT = """\
## Footprint report - date Sat 17 Oct 2026
## Unit = mm, Angle = deg.

$BeginDESCRIPTION

$BOARD
upper_left_corner 100.000000 50.000000
lower_right_corner 140.000000 75.000000
$EndBOARD

$MODULE "R1"
reference "R1"
value "10k"
footprint "R_0805"
attribut smd
position 105.000000 55.000000 orientation 0.00
layer front
$PAD "1"
shape rect
position -0.950000 0.000000 size 1.300000 1.500000 orientation 0.00
layer front
$EndPAD
$PAD "2"
shape rect
position 0.950000 0.000000 size 1.300000 1.500000 orientation 0.00
layer front
$EndPAD
$EndMODULE  R1

$MODULE "C1"
reference "C1"
value "100n"
footprint "C_0805"
attribut smd
position 120.000000 55.000000 orientation 90.00
layer front
$PAD "1"
shape rect
position -0.950000 0.000000 size 1.300000 1.500000 orientation 0.00
layer front
$EndPAD
$PAD "2"
shape rect
position 0.950000 0.000000 size 1.300000 1.500000 orientation 0.00
layer front
$EndPAD
$EndMODULE  C1

$MODULE "J1"
reference "J1"
value "CONN"
footprint "PinHeader_1x02"
attribut normal
position 135.000000 70.000000 orientation 0.00
layer front
$PAD "1"
shape rect
position 0.000000 0.000000 size 1.700000 1.700000 orientation 0.00
drill 1.000000
layer front
$EndPAD
$EndMODULE  J1

$EndDESCRIPTION
"""
