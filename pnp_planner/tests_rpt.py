# pnp_planner/tests_rpt.py
# Footprint report parser tests. Run with pytest, or:
#   python -m pnp_planner.tests_rpt

from __future__ import annotations

import math

from pnp_planner.io_rpt import parse_rpt_lines
from pnp_planner.sample_data import SAMPLE_RPT
from pnp_planner.types import component_key, pad_position


def test_sample_report() -> None:
    board = parse_rpt_lines(SAMPLE_RPT.splitlines())
    assert (board.dimension.w, board.dimension.h) == (40.0, 25.0)
    assert [p.component_name for p in board.parts] == ["R1", "C1", "J1"]

    r1 = board.find_part("R1")
    assert component_key(r1) == "R_0805@10k"
    assert (r1.pos.x, r1.pos.y) == (5.0, 5.0)
    assert r1.is_smd
    assert [p.name for p in r1.pads] == ["1", "2"]
    assert math.isclose(r1.bounding_box.width, 3.2)
    assert math.isclose(r1.bounding_box.height, 1.5)

    c1 = board.find_part("C1")
    assert c1.angle == 90.0
    p = pad_position(c1, c1.pads[1])
    assert math.isclose(p.x, 20.0, abs_tol=1e-9)
    assert math.isclose(p.y, 5.95)

    j1 = board.find_part("J1")
    assert not j1.is_smd
    assert len(j1.pads) == 1


def test_no_modules_is_an_error() -> None:
    try:
        parse_rpt_lines(["$BOARD", "upper_left_corner 0 0", "lower_right_corner 1 1", "$EndBOARD"])
    except ValueError:
        pass
    else:
        raise AssertionError("report without footprints must fail")


def test_malformed_position() -> None:
    lines = ['$MODULE "R1"', "reference R1", "position 1", "$EndMODULE R1"]
    try:
        parse_rpt_lines(lines)
    except ValueError as e:
        assert "line 3" in str(e)
    else:
        raise AssertionError("malformed position must fail")


def test_dimension_without_board_section() -> None:
    lines = [
        '$MODULE "A"', 'value "1k"', 'footprint "R"', "position 10 10 orientation 0", "$EndMODULE A",
        '$MODULE "B"', 'value "1k"', 'footprint "R"', "position 30 20 orientation 0", "$EndMODULE B",
    ]
    board = parse_rpt_lines(lines)
    assert (board.dimension.w, board.dimension.h) == (20.0, 10.0)
    # no reference line: module name is used
    assert board.parts[1].component_name == "B"
    assert (board.parts[1].pos.x, board.parts[1].pos.y) == (20.0, 10.0)


def main() -> None:
    print("Running report parser tests...")
    test_sample_report()
    test_no_modules_is_an_error()
    test_malformed_position()
    test_dimension_without_board_section()
    print("OK")


if __name__ == "__main__":
    main()
