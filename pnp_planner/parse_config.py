# pnp_planner/parse_config.py
# Parser for the human-authored configuration format (the one `-t` emits):
#
#   Board:
#   origin: 10 10 1.6          # board x/y origin, optional top z
#   Tape-Tray-Origin: 0 60 0   # added to every tape origin below
#   Tape: R_0805@10k R_0805@10K
#   origin: 5 7 2
#   spacing: 4 0
#   angle: 90                  # optional
#   count: 50                  # optional
#
# Any problem aborts the whole parse with a ConfigParseError.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from .config import DEFAULTS, ConfigParseError, PnPConfig
from .logger import get_logger
from .tape import Tape
from .validate import check_heights, validate_spacing


@dataclass(frozen=True)
class BoardScope:
    """Attributes apply to the board (after `Board:` or `Tape-Tray-Origin:`)."""


@dataclass(frozen=True)
class TapeScope:
    """Attributes apply to the tape opened by the last `Tape:` line."""
    tape: Tape


Scope = Union[BoardScope, TapeScope]


def _scan_floats(text: str, limit: int) -> List[float]:
    """Read up to `limit` leading numbers; stop at the first non-number."""
    out: List[float] = []
    for tok in text.split():
        if len(out) >= limit:
            break
        try:
            out.append(float(tok))
        except ValueError:
            break
    return out


def _strip_comment(text: str) -> str:
    """Drop everything from the first token starting with `#`; `Conn@#1` is a value."""
    kept: List[str] = []
    for tok in text.split():
        if tok.startswith("#"):
            break
        kept.append(tok)
    return " ".join(kept)


class _RichParser:
    def __init__(self, filename: str) -> None:
        self.filename = filename
        self.config = PnPConfig()
        self.scope: Scope = BoardScope()
        self.tray_x = 0.0
        self.tray_y = 0.0
        self.tray_height = 0.0

    def fail(self, line_no: int, msg: str) -> ConfigParseError:
        return ConfigParseError(msg, filename=self.filename, line=line_no)

    def require_tape(self, line_no: int, token: str) -> Tape:
        if isinstance(self.scope, TapeScope):
            return self.scope.tape
        raise self.fail(line_no, f"'{token}' without 'Tape:'")

    def feed(self, line_no: int, raw: str) -> None:
        parts = raw.split(None, 1)
        if not parts or parts[0].startswith("#"):
            return
        token = parts[0]
        rest = _strip_comment(parts[1]) if len(parts) > 1 else ""

        if token == "Board:":
            self.scope = BoardScope()

        elif token == "Tape-Tray-Origin:":
            self.scope = BoardScope()
            vals = _scan_floats(rest, 3)
            if len(vals) < 2:
                raise self.fail(line_no, f"Parse problem tape-tray origin: '{rest.strip()}'")
            self.tray_x, self.tray_y = vals[0], vals[1]
            if len(vals) > 2:
                self.tray_height = vals[2]

        elif token == "Tape:":
            names = rest.split()
            if not names:
                raise self.fail(line_no, "'Tape:' needs at least one <footprint>@<value>")
            tape = Tape()
            tape.set_angle(DEFAULTS.default_tape_angle)
            for name in names:
                self.config.tape_for_component[name] = tape
            self.scope = TapeScope(tape)

        elif token == "origin:":
            if isinstance(self.scope, TapeScope):
                vals = _scan_floats(rest, 3)
                if len(vals) != 3:
                    raise self.fail(line_no, f"Parse problem tape origin: '{rest.strip()}'")
                x, y, z = vals
                self.scope.tape.set_origin(x + self.tray_x, y + self.tray_y, z + self.tray_height)
            else:
                vals = _scan_floats(rest, 3)
                if len(vals) < 2:
                    raise self.fail(line_no, f"Parse problem board origin: '{rest.strip()}'")
                self.config.board.origin_x, self.config.board.origin_y = vals[0], vals[1]
                if len(vals) > 2:
                    self.config.board.top = vals[2]

        elif token == "spacing:":
            tape = self.require_tape(line_no, token)
            vals = _scan_floats(rest, 2)
            if len(vals) != 2:
                raise self.fail(line_no, f"Parse problem spacing: '{rest.strip()}'")
            if vals[0] == 0 and vals[1] == 0:
                raise self.fail(line_no, f"Spacing: at least one of dx, dy needs to be set: '{rest.strip()}'")
            tape.set_spacing(vals[0], vals[1])

        elif token == "angle:":
            tape = self.require_tape(line_no, token)
            vals = _scan_floats(rest, 1)
            if len(vals) != 1:
                raise self.fail(line_no, f"Parse problem angle: '{rest.strip()}'")
            tape.set_angle(vals[0])

        elif token == "count:":
            tape = self.require_tape(line_no, token)
            fields = rest.split()
            try:
                count = int(fields[0])
            except (IndexError, ValueError):
                raise self.fail(line_no, f"Parse problem count: '{rest.strip()}'") from None
            if count < 0:
                raise self.fail(line_no, f"count: needs to be zero or more: '{rest.strip()}'")
            tape.set_count(count)

        else:
            raise self.fail(line_no, f"invalid token '{token}'")


def parse_config_lines(lines: Iterable[str], filename: str = "<config>") -> PnPConfig:
    """Parse rich-format lines into a PnPConfig. Raises ConfigParseError."""
    parser = _RichParser(filename)
    for line_no, raw in enumerate(lines, start=1):
        parser.feed(line_no, raw)

    config = parser.config
    # Not derivable from this format
    config.bed_level = 0.0
    check_heights(config, filename=filename)

    log = get_logger()
    for issue in validate_spacing(config):
        log.warn(f"{filename}: {issue.component}: {issue.message}")
    return config


def parse_config(path: str | Path) -> PnPConfig:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise ConfigParseError(f"Can't open: {e.strerror}", filename=str(path)) from e
    return parse_config_lines(lines, filename=str(path))
