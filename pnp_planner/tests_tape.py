# pnp_planner/tests_tape.py
# Feeder state tests. Run with pytest, or:
#   python -m pnp_planner.tests_tape

from __future__ import annotations

import math

from pnp_planner.tape import DEFAULT_TAPE_COUNT, Tape


def test_defaults() -> None:
    t = Tape()
    assert t.remaining == DEFAULT_TAPE_COUNT == 1000
    assert t.get_position() == (0.0, 0.0)


def test_advance_moves_by_spacing_and_keeps_z() -> None:
    t = Tape()
    t.set_origin(10, 20, 3)
    t.set_spacing(4, -1)
    t.set_count(3)

    assert t.advance()
    assert t.get_position() == (14.0, 19.0)
    assert t.height == 3.0
    assert t.remaining == 2


def test_advance_exactly_remaining_times_then_fails() -> None:
    for n in (0, 1, 5):
        t = Tape()
        t.set_origin(1, 2, 0.5)
        t.set_spacing(2, 0)
        t.set_count(n)
        for _ in range(n):
            assert t.advance()
        before = (t.x, t.y, t.z, t.remaining)
        assert not t.advance()
        assert (t.x, t.y, t.z, t.remaining) == before
        assert t.get_position() is None
        assert t.remaining == 0


def test_slant_angle() -> None:
    t = Tape()
    t.set_spacing(0, 4)
    assert math.isclose(t.slant_angle, 90.0)
    t.set_spacing(-4, 0)
    assert math.isclose(t.slant_angle, 180.0)
    t.set_spacing(3, 3)
    assert math.isclose(t.slant_angle, 45.0)


def test_tapes_compare_by_identity() -> None:
    a, b = Tape(), Tape()
    assert a != b
    assert a == a


def main() -> None:
    print("Running tape tests...")
    test_defaults()
    test_advance_moves_by_spacing_and_keeps_z()
    test_advance_exactly_remaining_times_then_fails()
    test_slant_angle()
    test_tapes_compare_by_identity()
    print("OK")


if __name__ == "__main__":
    main()
