# pnp_planner/tests_measured.py
# Measured ("homer") config parser tests. Run with pytest, or:
#   python -m pnp_planner.tests_measured

from __future__ import annotations

import math

from pnp_planner.config import DEFAULTS, ConfigParseError
from pnp_planner.logger import reset_warnings
from pnp_planner.parse_measured import parse_measured_lines
from pnp_planner.sample_data import SAMPLE_MEASURED, sample_board
from pnp_planner.templates import create_homer_instruction


def _parse(text: str):
    return parse_measured_lines(sample_board(), text.splitlines(), filename="homer.txt")


def test_sample_measured() -> None:
    cfg = _parse(SAMPLE_MEASURED)
    assert cfg.bed_level == 0.5
    # R1 sits at (5, 5) on the board and was measured at (105, 55)
    assert (cfg.board.origin_x, cfg.board.origin_y) == (100.0, 50.0)
    assert cfg.board.top == 1.6

    r = cfg.tape_for_component["R_0805@10k"]
    assert r.get_position() == (10.0, 100.0)
    assert (r.dx, r.dy) == (4.0, 0.0)
    assert r.angle == DEFAULTS.default_tape_angle

    c = cfg.tape_for_component["C_0805@100n"]
    assert (c.dx, c.dy) == (0.0, 4.0)
    assert math.isclose(c.slant_angle, 90.0)


def test_spacing_is_averaged_over_advances() -> None:
    cfg = _parse("tape1:X 0 0 0\ntape3:X 4 0 0\n")
    t = cfg.tape_for_component["X"]
    assert (t.dx, t.dy) == (2.0, 0.0)
    assert t.get_position() == (0.0, 0.0)


def test_later_measurement_wins() -> None:
    cfg = _parse("tape1:X 0 0 0\ntape2:X 3 0 0\ntape4:X 0 9 0\n")
    t = cfg.tape_for_component["X"]
    assert (t.dx, t.dy) == (0.0, 3.0)


def test_bed_level_derived_from_board_top() -> None:
    cfg = _parse("board:R1 105 55 2.0\n")
    assert math.isclose(cfg.bed_level, 2.0 - DEFAULTS.typical_board_thickness)


def test_explicit_bed_level_is_kept() -> None:
    cfg = _parse("bedlevel:BedLevel-Z 1 1 0.25\nboard:R1 105 55 2.0\n")
    assert cfg.bed_level == 0.25


def test_unknown_board_part_keeps_origin() -> None:
    cfg = _parse("board:R99 105 55 1.6\n")
    assert (cfg.board.origin_x, cfg.board.origin_y) == (0.0, 0.0)
    assert cfg.board.top == 1.6


def test_noise_lines_are_skipped() -> None:
    reset_warnings()
    cfg = _parse(
        "hello world\n"
        "tape1:X 1 2\n"            # missing z
        "tape0:X 1 2 3\n"
        "tape2:Y 1 2 3\n"          # no tape1 for Y
        "board:R1 a b c\n"
        "\n# comment\n"
        "tape1:Z 1 2 3\n"
    )
    assert list(cfg.tape_for_component) == ["Z"]
    # one warning per skipped line
    assert reset_warnings() == 5


def test_tape_below_bed_level_rejected() -> None:
    try:
        _parse("bedlevel:BedLevel-Z 0 0 1.0\ntape1:X 0 0 0.5\n")
    except ConfigParseError as e:
        assert e.filename == "homer.txt"
    else:
        raise AssertionError("tape below bed level must fail")


def test_board_below_bed_level_rejected() -> None:
    try:
        _parse("bedlevel:BedLevel-Z 0 0 3.0\nboard:R1 105 55 2.0\n")
    except ConfigParseError:
        pass
    else:
        raise AssertionError("board below bed level must fail")


def test_homer_instruction_keys_parse_back() -> None:
    board = sample_board()
    text = create_homer_instruction(board)
    lines = text.splitlines()
    assert lines[0].startswith("bedlevel:BedLevel-Z")
    # R_0805@10k is used twice -> tape2
    assert "tape2:R_0805@10k\tfind 2. component" in lines
    assert "tape2:C_0805@100n\tfind 2. component" in lines
    assert lines[-2].startswith("board:R1\t")
    assert lines[-1].startswith("board:D1\t")


def main() -> None:
    print("Running measured config tests...")
    test_sample_measured()
    test_spacing_is_averaged_over_advances()
    test_later_measurement_wins()
    test_bed_level_derived_from_board_top()
    test_explicit_bed_level_is_kept()
    test_unknown_board_part_keeps_origin()
    test_noise_lines_are_skipped()
    test_tape_below_bed_level_rejected()
    test_board_below_bed_level_rejected()
    test_homer_instruction_keys_parse_back()
    print("OK")


if __name__ == "__main__":
    main()
