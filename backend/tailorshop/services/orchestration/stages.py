"""Canonical stage order for the production pipeline."""
from __future__ import annotations

from typing import Optional

from ...models import STAGES


def stage_index(stage: Optional[str]) -> int:
    """Position of `stage` in the pipeline, or -1 when unrecognised."""
    try:
        return STAGES.index(stage)  # type: ignore[arg-type]
    except ValueError:
        return -1


def next_stage(stage: Optional[str]) -> Optional[str]:
    """Following stage, or None at the end of the pipeline or for unknown values."""
    idx = stage_index(stage)
    if idx == -1 or idx == len(STAGES) - 1:
        return None
    return STAGES[idx + 1]


def previous_stage(stage: Optional[str]) -> Optional[str]:
    idx = stage_index(stage)
    if idx <= 0:
        return None
    return STAGES[idx - 1]


def is_single_step(current: Optional[str], target: str) -> bool:
    """True when `target` is exactly one position away from `current`."""
    a, b = stage_index(current), stage_index(target)
    return a != -1 and b != -1 and abs(a - b) == 1
