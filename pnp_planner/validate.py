# pnp_planner/validate.py
# Validation utilities for a parsed configuration:
# - nothing may sit below the bed level (tapes, measured board top)
# - tapes without spacing can only deliver one component
#
# Parsers call check_heights() as their final step.

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .config import ConfigParseError, PnPConfig


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    component: Optional[str] = None


def validate_heights(config: PnPConfig, *, include_board_top: bool = False) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    bed = config.bed_level

    if include_board_top and config.board.top < bed:
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"board top {config.board.top:.1f} below bed-level {bed:.1f}",
            )
        )

    for tape in config.tapes():
        if tape.height < bed:
            keys = config.keys_for(tape)
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"tape pickup height {tape.height:.1f} below bed-level {bed:.1f}",
                    component=" ".join(keys),
                )
            )
    return issues


def validate_spacing(config: PnPConfig) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for tape in config.tapes():
        if tape.dx == 0 and tape.dy == 0 and tape.remaining > 1:
            issues.append(
                ValidationIssue(
                    level="WARN",
                    message="tape has no spacing; every pick uses the same spot",
                    component=" ".join(config.keys_for(tape)),
                )
            )
    return issues


def raise_on_errors(issues: List[ValidationIssue], filename: Optional[str] = None) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "; ".join(
            f"{e.message}" + (f" ({e.component})" if e.component else "") for e in errs
        )
        raise ConfigParseError(
            "things below bed-level, I'd consider this an error: " + msg, filename=filename
        )


def check_heights(config: PnPConfig, *, filename: Optional[str] = None, include_board_top: bool = False) -> None:
    raise_on_errors(validate_heights(config, include_board_top=include_board_top), filename=filename)
