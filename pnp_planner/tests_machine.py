# pnp_planner/tests_machine.py
# G-code and PostScript machine tests. Run with pytest, or:
#   python -m pnp_planner.tests_machine

from __future__ import annotations

import io

from pnp_planner.machine import GCodeMachine, GCodeParams
from pnp_planner.parse_config import parse_config_lines
from pnp_planner.postscript import PostScriptMachine
from pnp_planner.sample_data import SAMPLE_CONFIG, sample_board
from pnp_planner.sequence import pick_n_place, solder_dispense
from pnp_planner.types import Dimension


def test_gcode_pick_n_place() -> None:
    board = sample_board()
    cfg = parse_config_lines(SAMPLE_CONFIG.splitlines())
    out = io.StringIO()
    m = GCodeMachine(out)
    assert m.init(cfg, "test run", board.dimension)
    pick_n_place(cfg, board, m)
    m.finish()

    text = out.getvalue()
    lines = text.splitlines()
    assert lines[0] == "; test run"
    assert "G21 ; mm" in lines
    # four parts have tapes, D1 has none
    assert text.count("vacuum on") == 4
    assert text.count("vacuum off") == 4
    assert "; no component available for D1" in text
    # first R_0805 pickup, then placed at board origin + part position
    assert "G0 X10.000 Y105.000 F6000" in lines
    assert "G0 X105.000 Y55.000 F6000" in lines
    assert lines[-1] == "M84 ; motors off"


def test_gcode_dispense_timing() -> None:
    board = sample_board()
    out = io.StringIO()
    m = GCodeMachine(out, GCodeParams(dispense_init_ms=10, dispense_area_ms=100))
    assert m.init(None, "dispense", board.dimension)
    solder_dispense(board, m, optimizer=list)
    m.finish()

    text = out.getvalue()
    assert text.count("M106") == 10
    # 0805 pad: 1.3 * 1.5 mm^2 -> 10 + 195 ms
    assert "G4 P205" in text
    # no config: empty config with typical board thickness, dispense clearance 0.4
    assert "G1 Z2.000 F1000" in text


def test_init_fails_on_empty_board() -> None:
    for machine in (GCodeMachine(io.StringIO()), PostScriptMachine(io.BytesIO())):
        assert not machine.init(None, "x", Dimension(0, 10))


def test_postscript_output() -> None:
    board = sample_board()
    cfg = parse_config_lines(SAMPLE_CONFIG.splitlines())
    out = io.BytesIO()
    m = PostScriptMachine(out)
    assert m.init(cfg, "preview", board.dimension)
    pick_n_place(cfg, board, m)
    m.finish()

    data = out.getvalue()
    assert data.startswith(b"%!PS")
    assert len(m.moves) == 4


def main() -> None:
    print("Running machine tests...")
    test_gcode_pick_n_place()
    test_gcode_dispense_timing()
    test_init_fails_on_empty_board()
    test_postscript_output()
    print("OK")


if __name__ == "__main__":
    main()
