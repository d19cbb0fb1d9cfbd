# pnp_planner/tests_sequence.py
# Sequencing tests: placement order, tape consumption, dispense order, nearest part.
# Run with pytest, or:
#   python -m pnp_planner.tests_sequence

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Tuple

from pnp_planner.config import PnPConfig
from pnp_planner.machine import Machine
from pnp_planner.parse_config import parse_config_lines
from pnp_planner.parse_measured import parse_measured_lines
from pnp_planner.sample_data import SAMPLE_CONFIG, board_from, sample_board, two_pad_part
from pnp_planner.sequence import (
    DepletionPolicy,
    FeederDepletedError,
    collect_pads,
    find_part_closest_to,
    pick_n_place,
    solder_dispense,
    sort_parts_for_placement,
)
from pnp_planner.tape import Tape
from pnp_planner.types import Position


class RecordingMachine(Machine):
    def __init__(self) -> None:
        self.ops: List[Tuple[str, str, Optional[Tuple[float, float]]]] = []

    def init(self, config, metadata, dimension) -> bool:
        return True

    def pick_part(self, part, tape) -> None:
        self.ops.append(("pick", part.component_name, tape.get_position() if tape else None))

    def place_part(self, part, tape) -> None:
        self.ops.append(("place", part.component_name, tape.get_position() if tape else None))

    def dispense(self, part, pad) -> None:
        self.ops.append(("dispense", f"{part.component_name}.{pad.name}", None))

    def finish(self) -> None:
        self.ops.append(("finish", "", None))


def _config_with_heights(**heights: float) -> PnPConfig:
    cfg = PnPConfig(bed_level=0.0)
    for key, z in heights.items():
        t = Tape()
        t.set_origin(0, 0, z)
        t.set_spacing(4, 0)
        cfg.tape_for_component[key] = t
    return cfg


def test_sorted_by_pickup_height_unmapped_first() -> None:
    parts = [
        two_pad_part("A", "F", "h5", 0, 0),
        two_pad_part("B", "F", "h1", 0, 0),
        two_pad_part("C", "F", "h3", 0, 0),
        two_pad_part("Z", "F", "none", 0, 0),
    ]
    cfg = _config_with_heights(**{"F@h5": 5, "F@h1": 1, "F@h3": 3})
    order = [p.component_name for p in sort_parts_for_placement(parts, cfg)]
    assert order == ["Z", "B", "C", "A"]


def test_unmapped_first_with_negative_heights() -> None:
    # Z zeroed at the top of the machine: bed and tapes sit below zero.
    parts = [two_pad_part("A", "F", "low", 0, 0), two_pad_part("Z", "F", "none", 5, 0)]
    cfg = parse_measured_lines(board_from(parts), ["bedlevel:B 0 0 -20", "tape1:F@low 0 0 -18"])
    assert cfg.find_tape(parts[0]).height == -18
    order = [p.component_name for p in sort_parts_for_placement(parts, cfg)]
    assert order == ["Z", "A"]


def test_ties_broken_by_component_name() -> None:
    parts = [
        two_pad_part("R3", "R", "1k", 0, 0),
        two_pad_part("C10", "C", "1u", 0, 0),
        two_pad_part("R1", "R", "1k", 0, 0),
    ]
    cfg = _config_with_heights(**{"R@1k": 2, "C@1u": 2})
    order = [p.component_name for p in sort_parts_for_placement(parts, cfg)]
    assert order == ["C10", "R1", "R3"]


def test_no_config_keeps_board_order() -> None:
    board = sample_board()
    assert sort_parts_for_placement(board.parts, None) == board.parts

    m = RecordingMachine()
    res = pick_n_place(None, board, m)
    names = [name for op, name, _ in m.ops if op == "pick"]
    assert names == [p.component_name for p in board.parts]
    assert res.no_tape == []


def test_pick_n_place_consumes_tapes() -> None:
    board = sample_board()
    cfg = parse_config_lines(SAMPLE_CONFIG.splitlines())
    m = RecordingMachine()
    res = pick_n_place(cfg, board, m)

    # D1 (LED) has no tape; it goes first. Then C1 (1.5), R1/R2 (2), C2 (3).
    picks = [(name, pos) for op, name, pos in m.ops if op == "pick"]
    assert [n for n, _ in picks] == ["D1", "C1", "R1", "R2", "C2"]
    assert picks[0][1] is None
    assert picks[2][1] == (10.0, 105.0)
    assert picks[3][1] == (14.0, 105.0)

    assert res.no_tape == ["D1"]
    assert res.placed == ["C1", "R1", "R2", "C2"]
    assert cfg.tape_for_component["R_0805@10k"].remaining == 8

    # pick and place alternate
    kinds = [op for op, _, _ in m.ops]
    assert kinds == ["pick", "place"] * 5


def test_depleted_tape_warns_by_default() -> None:
    parts = [two_pad_part(f"R{i}", "R", "1k", i, 0) for i in range(1, 4)]
    cfg = _config_with_heights(**{"R@1k": 1})
    cfg.tape_for_component["R@1k"].set_count(2)

    m = RecordingMachine()
    res = pick_n_place(cfg, board_from(parts), m)
    assert res.placed == ["R1", "R2"]
    assert res.depleted == ["R3"]
    assert m.ops[-2] == ("pick", "R3", None)


def test_depleted_tape_strict() -> None:
    parts = [two_pad_part(f"R{i}", "R", "1k", i, 0) for i in range(1, 3)]
    cfg = _config_with_heights(**{"R@1k": 1})
    cfg.tape_for_component["R@1k"].set_count(1)
    try:
        pick_n_place(cfg, board_from(parts), RecordingMachine(), depletion=DepletionPolicy.STRICT)
    except FeederDepletedError as e:
        assert e.part.component_name == "R2"
        assert e.keys == ["R@1k"]
    else:
        raise AssertionError("strict policy must raise on an empty tape")


def test_dispense_every_pad_once() -> None:
    board = sample_board()
    m = RecordingMachine()
    order = solder_dispense(board, m, optimizer=lambda items: list(reversed(items)))
    assert len(order) == 10
    dispensed = [name for op, name, _ in m.ops if op == "dispense"]
    assert dispensed[0] == "D1.2"
    expected = [f"{p.component_name}.{pad.name}" for p, pad in collect_pads(board)]
    assert Counter(dispensed) == Counter(expected)


def test_dispense_default_optimizer_is_permutation() -> None:
    board = sample_board()
    m = RecordingMachine()
    order = solder_dispense(board, m)
    assert Counter(id(pad) for _, pad in order) == Counter(id(pad) for _, pad in collect_pads(board))


def test_find_part_closest_to() -> None:
    board = sample_board()
    assert find_part_closest_to(board.parts, Position(0, 0)).component_name == "R1"
    assert find_part_closest_to(board.parts, Position(21, 19)).component_name == "C2"
    assert find_part_closest_to([], Position(0, 0)) is None

    # equal distance: first one wins
    a = two_pad_part("A", "F", "v", -1, 0)
    b = two_pad_part("B", "F", "v", 1, 0)
    assert find_part_closest_to([a, b], Position(0, 0)) is a
    assert find_part_closest_to([b, a], Position(0, 0)) is b


def main() -> None:
    print("Running sequencing tests...")
    test_sorted_by_pickup_height_unmapped_first()
    test_unmapped_first_with_negative_heights()
    test_ties_broken_by_component_name()
    test_no_config_keeps_board_order()
    test_pick_n_place_consumes_tapes()
    test_depleted_tape_warns_by_default()
    test_depleted_tape_strict()
    test_dispense_every_pad_once()
    test_dispense_default_optimizer_is_permutation()
    test_find_part_closest_to()
    print("OK")


if __name__ == "__main__":
    main()
