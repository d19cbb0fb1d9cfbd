# pnp_planner/tests_smoke.py
# Very small end-to-end tests of the command line, run with pytest or:
#   python -m pnp_planner.tests_smoke
#
# These are not full unit tests, but they quickly tell you if report parsing,
# config parsing, sequencing and the machines are wired correctly.

from __future__ import annotations

import io
import os
import tempfile
from contextlib import redirect_stdout

from pnp_planner.cli import main as cli_main
from pnp_planner.sample_data import SAMPLE_RPT


def _write(d: str, name: str, text: str) -> str:
    path = os.path.join(d, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def _run(argv) -> tuple:
    buf = io.StringIO()
    with redirect_stdout(buf):
        rc = cli_main(["-q"] + list(argv))
    return rc, buf.getvalue()


def test_list_and_template() -> None:
    with tempfile.TemporaryDirectory() as d:
        rpt = _write(d, "board.rpt", SAMPLE_RPT)

        rc, out = _run(["-l", rpt])
        assert rc == 0
        keys = ["C_0805@100n", "PinHeader_1x02@CONN", "R_0805@10k"]
        assert out.splitlines() == [f"{k:<19}    1" for k in keys]

        rc, template = _run(["-t", rpt])
        assert rc == 0
        assert "Tape: R_0805@10k" in template


def test_template_then_pick_n_place() -> None:
    with tempfile.TemporaryDirectory() as d:
        rpt = _write(d, "board.rpt", SAMPLE_RPT)
        rc, template = _run(["-t", rpt])
        cfg = _write(d, "board.config", template)

        rc, gcode = _run(["-p", "-c", cfg, rpt])
        assert rc == 0
        assert gcode.count("vacuum on") == 3


def test_homer_then_measured_pick_n_place() -> None:
    with tempfile.TemporaryDirectory() as d:
        rpt = _write(d, "board.rpt", SAMPLE_RPT)
        measured = _write(
            d,
            "measured.txt",
            "bedlevel:BedLevel-Z 0 0 0\n"
            "tape1:R_0805@10k 10 100 2\n"
            "tape1:C_0805@100n 10 110 2\n"
            "board:R1 105 55 1.6\n",
        )
        rc, gcode = _run(["-p", "-C", measured, rpt])
        assert rc == 0
        assert gcode.count("vacuum on") == 2
        assert "; no component available for J1" in gcode


def test_dispense_to_file_and_postscript() -> None:
    with tempfile.TemporaryDirectory() as d:
        rpt = _write(d, "board.rpt", SAMPLE_RPT)
        gcode_path = os.path.join(d, "paste.gcode")
        rc, _ = _run(["-d", "-D", "20,10", "--optimizer", "greedy", "--out", gcode_path, rpt])
        assert rc == 0
        with open(gcode_path, encoding="utf-8") as f:
            assert f.read().count("M106") == 5

        ps_path = os.path.join(d, "paste.ps")
        rc, _ = _run(["-d", "-P", "--out", ps_path, rpt])
        assert rc == 0
        with open(ps_path, "rb") as f:
            assert f.read(4) == b"%!PS"


def test_failures_exit_1() -> None:
    with tempfile.TemporaryDirectory() as d:
        rpt = _write(d, "board.rpt", SAMPLE_RPT)
        bad = _write(d, "bad.config", "Tape: R_0805@10k\nspacing: 0 0\n")
        assert _run(["-p", "-c", bad, rpt])[0] == 1
        assert _run(["-p", os.path.join(d, "missing.rpt")])[0] == 1
        assert _run([rpt])[0] == 1

        below = _write(d, "below.txt", "bedlevel:BedLevel-Z 0 0 5\ntape1:R_0805@10k 0 0 1\n")
        assert _run(["-p", "-C", below, rpt])[0] == 1

        short = _write(d, "short.config", "Tape: R_0805@10k\norigin: 1 1 1\nspacing: 4 0\ncount: 0\n")
        assert _run(["-p", "--strict-stock", "-c", short, rpt])[0] == 1
        assert _run(["-p", "-c", short, rpt])[0] == 0


def main() -> None:
    print("Running smoke tests...")
    test_list_and_template()
    test_template_then_pick_n_place()
    test_homer_then_measured_pick_n_place()
    test_dispense_to_file_and_postscript()
    test_failures_exit_1()
    print("OK")


if __name__ == "__main__":
    main()
