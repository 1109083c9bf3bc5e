"""Completion arithmetic for the seven-step wizard.

Pure functions over progress flags.  ``flags`` may be a
:class:`~shared.schemas.projects.ProgressFlags` or any sequence of seven
booleans ordered step 1 to step 7.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

TOTAL_STEPS = 7


def _as_list(flags: Any) -> List[bool]:
    values = flags.as_list() if hasattr(flags, "as_list") else list(flags)
    if len(values) != TOTAL_STEPS:
        raise ValueError(f"Expected {TOTAL_STEPS} progress flags, got {len(values)}")
    return [bool(v) for v in values]


def completed_steps(flags: Any) -> int:
    return sum(_as_list(flags))


def completion_rate(flags: Any) -> int:
    """``round(100 * done / 7)``, rounding half up."""
    done = completed_steps(flags)
    return int(100 * done / TOTAL_STEPS + 0.5)


def is_complete(flags: Any) -> bool:
    return completed_steps(flags) == TOTAL_STEPS


def next_incomplete_step(flags: Any) -> Optional[int]:
    """Lowest-numbered step whose flag is false, or ``None`` when all are done."""
    for number, done in enumerate(_as_list(flags), start=1):
        if not done:
            return number
    return None


def incomplete_steps(flags: Any) -> Sequence[int]:
    return [n for n, done in enumerate(_as_list(flags), start=1) if not done]
