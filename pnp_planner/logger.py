# pnp_planner/logger.py
# Lightweight logging utilities.
# Everything goes to stderr: stdout is reserved for G-code / PostScript / templates.

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass
class Logger:
    """
    Prefixed stderr logger with an on/off switch for info and warnings.

    Warnings are counted even while output is disabled, so a quiet run can
    still tell how many lines of a config file were skipped.
    """
    enabled: bool = True
    prefix: str = "[PNP]"
    warnings: int = 0

    def info(self, msg: str) -> None:
        if self.enabled:
            print(f"{self.prefix} {msg}", file=sys.stderr)

    def warn(self, msg: str) -> None:
        self.warnings += 1
        if self.enabled:
            print(f"{self.prefix} WARNING: {msg}", file=sys.stderr)

    def error(self, msg: str) -> None:
        print(f"{self.prefix} ERROR: {msg}", file=sys.stderr)


# Global default logger
LOGGER = Logger(enabled=True)


def set_enabled(flag: bool) -> None:
    LOGGER.enabled = bool(flag)


def reset_warnings() -> int:
    """Zero the warning count; returns the previous value."""
    n = LOGGER.warnings
    LOGGER.warnings = 0
    return n


def get_logger() -> Logger:
    return LOGGER
