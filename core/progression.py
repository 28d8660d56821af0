"""
core.progression
Experience progression across a level span.

Two spans are defined:
- same level: gained = end - start (may be negative, never clamped)
- level up:   rest of the start level + every full level in between + end amount

A level-down span has no agreed formula. It is reported as LEVEL_DOWN with
gained=None so callers can show it as unsupported instead of a made-up number.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .levels import ThresholdTable


class Span(str, Enum):
    SAME_LEVEL = "same_level"
    LEVEL_UP = "level_up"
    LEVEL_DOWN = "level_down"


@dataclass(frozen=True)
class Progress:
    span: Span
    gained: Optional[int]
    start_pct: float
    end_pct: float

    @property
    def supported(self) -> bool:
        return self.gained is not None


def round_half_up(x: float, ndigits: int = 0) -> float:
    """Round like JS Math.round (ties go up), not banker's rounding."""
    scale = 10 ** ndigits
    return math.floor(x * scale + 0.5) / scale


def percentage(amount: int, level: int, table: ThresholdTable) -> float:
    """Share of the level completed, in percent with 2 decimals. Unknown level -> 0."""
    required = table[level]
    if required == 0:
        return 0.0
    return round_half_up(amount / required * 100, 2)


def progress(
    start_level: int,
    start_amount: int,
    end_level: int,
    end_amount: int,
    table: ThresholdTable,
) -> Progress:
    start_pct = percentage(start_amount, start_level, table)
    end_pct = percentage(end_amount, end_level, table)

    if end_level == start_level:
        return Progress(Span.SAME_LEVEL, int(end_amount) - int(start_amount), start_pct, end_pct)

    if end_level < start_level:
        # TODO: needs a product decision on what a level-down span should report.
        return Progress(Span.LEVEL_DOWN, None, start_pct, end_pct)

    gained = table[start_level] - int(start_amount)
    for level in range(int(start_level) + 1, int(end_level)):
        gained += table[level]
    gained += int(end_amount)
    return Progress(Span.LEVEL_UP, gained, start_pct, end_pct)
