# pnp_planner/__main__.py
# Package entrypoint so you can run:
#   python -m pnp_planner --help
# and it will delegate to the CLI.
#
# Examples:
#   python -m pnp_planner -t board.rpt > board.config
#   python -m pnp_planner -p -c board.config board.rpt > pnp.gcode

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
