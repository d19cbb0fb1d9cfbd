# pnp_planner/tests_optimize.py
# Travel optimizer tests. Run with pytest, or:
#   python -m pnp_planner.tests_optimize

from __future__ import annotations

from collections import Counter

from pnp_planner.config import DEFAULTS
from pnp_planner.optimize import METHODS, _search_parameters, optimize_parts, path_length
from pnp_planner.sample_data import board_from, sample_board, two_pad_part
from pnp_planner.sequence import collect_pads


def _ids(items):
    return Counter((part.component_name, pad.name) for part, pad in items)


def test_empty_and_single() -> None:
    for method in METHODS:
        assert optimize_parts([], method=method) == []
        one = collect_pads(sample_board())[:1]
        out = optimize_parts(one, method=method)
        assert out == one
        assert out is not one


def test_permutation_and_deterministic() -> None:
    items = collect_pads(sample_board())
    for method in METHODS:
        a = optimize_parts(items, method=method)
        b = optimize_parts(list(items), method=method)
        assert _ids(a) == _ids(items)
        assert len(a) == len(items)
        assert a == b


def test_input_not_modified() -> None:
    items = collect_pads(sample_board())
    before = list(items)
    optimize_parts(items)
    assert items == before


def test_shorter_than_zigzag() -> None:
    # Pads laid out on a line, fed in a zig-zag order.
    parts = [two_pad_part(f"R{i}", "R", "1k", x, 0, pitch=2.0) for i, x in enumerate([40, 0, 30, 10, 20])]
    items = collect_pads(board_from(parts))
    for method in METHODS:
        out = optimize_parts(items, method=method)
        assert path_length(out) < path_length(items)
        # one sweep along the line, at most one short step back to x=-1
        assert path_length(out) <= 45.0 + 1e-6


def test_routing_search_is_capped() -> None:
    assert _search_parameters(DEFAULTS.routing_solution_limit).solution_limit == DEFAULTS.routing_solution_limit

    # A larger board with the first solution only still visits every pad once.
    parts = [two_pad_part(f"R{i}", "R", "1k", (i * 7) % 40, (i * 11) % 30) for i in range(60)]
    items = collect_pads(board_from(parts))
    out = optimize_parts(items, solution_limit=1)
    assert _ids(out) == _ids(items)
    assert out == optimize_parts(items, solution_limit=1)
    try:
        optimize_parts(items, solution_limit=0)
    except ValueError:
        pass
    else:
        raise AssertionError("solution_limit below 1 must raise")


def test_unknown_method() -> None:
    try:
        optimize_parts([], method="annealing")
    except ValueError:
        pass
    else:
        raise AssertionError("unknown method must raise")


def main() -> None:
    print("Running optimizer tests...")
    test_empty_and_single()
    test_permutation_and_deterministic()
    test_input_not_modified()
    test_shorter_than_zigzag()
    test_routing_search_is_capped()
    test_unknown_method()
    print("OK")


if __name__ == "__main__":
    main()
