# pnp_planner/tests_config.py
# Rich-format config parser tests. Run with pytest, or:
#   python -m pnp_planner.tests_config

from __future__ import annotations

import os
import tempfile

from pnp_planner.config import ConfigParseError
from pnp_planner.parse_config import parse_config, parse_config_lines
from pnp_planner.sample_data import SAMPLE_CONFIG, sample_board
from pnp_planner.templates import create_config_template, extract_components


def _parse(text: str):
    return parse_config_lines(text.splitlines(), filename="test.config")


def _fails(text: str) -> ConfigParseError:
    try:
        _parse(text)
    except ConfigParseError as e:
        return e
    raise AssertionError(f"expected ConfigParseError for:\n{text}")


def test_sample_config() -> None:
    cfg = _parse(SAMPLE_CONFIG)
    assert (cfg.board.origin_x, cfg.board.origin_y, cfg.board.top) == (100, 50, 1.6)
    assert cfg.bed_level == 0

    r = cfg.tape_for_component["R_0805@10k"]
    # tape origin is relative to Tape-Tray-Origin
    assert r.get_position() == (10.0, 105.0)
    assert r.height == 2.0
    assert r.remaining == 10
    assert r.angle == 90.0
    assert (r.dx, r.dy) == (4.0, 0.0)

    c = cfg.tape_for_component["C_0805@100n"]
    assert c.angle == 0.0
    assert c.remaining == 1000
    assert cfg.tape_for_component["C_1206@10u"].remaining == 1


def test_alias_shares_one_tape() -> None:
    cfg = _parse(SAMPLE_CONFIG)
    a = cfg.tape_for_component["C_0805@100n"]
    b = cfg.tape_for_component["C_0805@0.1uF"]
    assert a is b
    a.advance()
    assert b.get_position() == (14.0, 115.0)
    assert len(list(cfg.tapes())) == 3


def test_tray_height_is_added() -> None:
    cfg = _parse("Tape-Tray-Origin: 1 2 3\nTape: X@1\norigin: 1 1 1\n")
    t = cfg.tape_for_component["X@1"]
    assert t.get_position() == (2.0, 3.0)
    assert t.height == 4.0


def test_board_origin_without_top() -> None:
    cfg = _parse("Board:\norigin: 7 8\n")
    assert (cfg.board.origin_x, cfg.board.origin_y) == (7, 8)
    assert cfg.board.top == 0


def test_comments_and_blank_lines() -> None:
    cfg = _parse("# header\n\n   \nTape: X@1 # trailing comment\norigin: 1 2 3 # fill me\n#count: 5\n")
    assert list(cfg.tape_for_component) == ["X@1"]
    assert cfg.tape_for_component["X@1"].remaining == 1000


def test_hash_inside_identity_is_kept() -> None:
    cfg = _parse("Tape: Conn@#1 Conn@#2 # two names\norigin: 1 2 3\nspacing: 4 0\n")
    assert list(cfg.tape_for_component) == ["Conn@#1", "Conn@#2"]
    assert cfg.tape_for_component["Conn@#1"] is cfg.tape_for_component["Conn@#2"]


def test_negative_count_rejected() -> None:
    e = _fails("Tape: X@1\norigin: 1 2 3\nspacing: 4 0\ncount: -3\n")
    assert e.line == 4
    cfg = _parse("Tape: X@1\norigin: 1 2 3\nspacing: 4 0\ncount: 0\n")
    assert cfg.tape_for_component["X@1"].get_position() is None


def test_zero_spacing_rejected() -> None:
    e = _fails("Tape: X@1\norigin: 1 2 3\nspacing: 0 0\ncount: 3\n")
    assert e.line == 3
    _fails("Board:\norigin: 1 1 1\nTape: A@1 B@2\nspacing: 0.0 -0\n")
    _fails("spacing: 0 0\n")


def test_attributes_need_a_tape() -> None:
    for token in ("spacing: 1 0", "angle: 90", "count: 4"):
        _fails(f"Board:\n{token}\n")
    # Tape-Tray-Origin closes the tape scope
    _fails("Tape: X@1\nTape-Tray-Origin: 0 0 0\ncount: 4\n")


def test_syntax_errors() -> None:
    _fails("Tape: X@1\norigin: 1 2\n")
    _fails("Tape: X@1\nspacing: 4\n")
    _fails("Tape: X@1\ncount: many\n")
    _fails("Tape: X@1\nangle: left\n")
    _fails("Tape-Tray-Origin: 5\n")
    _fails("Board:\norigin: 1\n")
    _fails("Tape:\n")


def test_invalid_token_names_file_and_line() -> None:
    e = _fails("Board:\norigin: 1 2\nfoo: 3\n")
    assert e.filename == "test.config"
    assert e.line == 3
    assert "test.config:3" in str(e)
    assert "foo:" in str(e)


def test_tape_below_bed_level_rejected() -> None:
    _fails("Tape: X@1\norigin: 1 2 -0.5\n")


def test_template_round_trip() -> None:
    board = sample_board()
    cfg = _parse(create_config_template(board))
    counts, _ = extract_components(board.parts)
    assert set(cfg.tape_for_component) == set(counts)
    for key, n in counts.items():
        assert cfg.tape_for_component[key].remaining == n


def test_parse_config_file() -> None:
    with tempfile.TemporaryDirectory() as d:
        path = os.path.join(d, "board.config")
        with open(path, "w", encoding="utf-8") as f:
            f.write(SAMPLE_CONFIG)
        cfg = parse_config(path)
        assert "R_0805@10k" in cfg.tape_for_component

        try:
            parse_config(os.path.join(d, "missing.config"))
        except ConfigParseError as e:
            assert "missing.config" in str(e)
        else:
            raise AssertionError("missing file must fail")


def main() -> None:
    print("Running config tests...")
    test_sample_config()
    test_alias_shares_one_tape()
    test_tray_height_is_added()
    test_board_origin_without_top()
    test_comments_and_blank_lines()
    test_hash_inside_identity_is_kept()
    test_negative_count_rejected()
    test_zero_spacing_rejected()
    test_attributes_need_a_tape()
    test_syntax_errors()
    test_invalid_token_names_file_and_line()
    test_tape_below_bed_level_rejected()
    test_template_round_trip()
    test_parse_config_file()
    print("OK")


if __name__ == "__main__":
    main()
