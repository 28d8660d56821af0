"""
core.state
Core domain data models (UI/storage independent).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


class ClockMode(str, Enum):
    COUNT_UP = "count-up"
    COUNT_DOWN = "count-down"


@dataclass(frozen=True)
class ClockState:
    """Persistable clock state.

    - seconds: elapsed (count-up) or remaining (count-down) while stopped
    - anchor_ms: epoch ms the running value is derived from; None while stopped
      (count-up: start instant, count-down: target instant)
    - target_seconds: the duration a countdown was set to (0 in count-up)
    """

    mode: ClockMode = ClockMode.COUNT_UP
    anchor_ms: Optional[int] = None
    seconds: int = 0
    running: bool = False
    target_seconds: int = 0

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "seconds": int(self.seconds),
            "running": bool(self.running),
            "anchor": self.anchor_ms,
            "target": int(self.target_seconds),
        }


@dataclass(frozen=True)
class TrackedQuantity:
    """One tracked item: counts before/after the session and its unit price."""

    name: str
    start_count: int = 0
    end_count: int = 0
    unit_value: int = 0


@dataclass(frozen=True)
class SessionInputs:
    start_level: int = 0
    start_amount: int = 0
    start_currency: int = 0
    end_level: int = 0
    end_amount: int = 0
    end_currency: int = 0
    tracked: Tuple[TrackedQuantity, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ItemResult:
    name: str
    delta: int
    rate_per_5min: float
    value: int


@dataclass(frozen=True)
class SessionResult:
    """Derived session metrics.

    amount_gained / amount_rate_per_5min are None when the level span is not
    supported (end level below start level).
    """

    level_delta: int
    span: str
    start_pct: float
    end_pct: float
    amount_gained: Optional[int]
    amount_rate_per_5min: Optional[int]
    currency_raw_delta: int
    currency_raw_rate_per_5min: int
    currency_net_delta: int
    currency_rate_per_5min: int
    items: Tuple[ItemResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HuntingRecord:
    """A saved session. Created once, never mutated."""

    id: str
    timestamp_ms: int
    duration_seconds: int
    location: str
    inputs: SessionInputs
    result: SessionResult
    note: str = ""


def default_clock_state(mode: ClockMode = ClockMode.COUNT_UP) -> ClockState:
    """Zeroed, stopped clock.

    Keep it in core so headless tests and UI share the same baseline.
    """
    return ClockState(mode=mode, anchor_ms=None, seconds=0, running=False)
