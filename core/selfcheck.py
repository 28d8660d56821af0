"""
core.selfcheck
Minimal "it runs" proof for the clock and the calculators.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from typing import Dict, List

from .clock import ClockEngine, format_hms
from .levels import REFERENCE_TABLE
from .progression import Span, progress
from .rates import rate_per_5min
from .state import ClockMode


class _Tape:
    """In-memory store + fake time, enough for the engine."""

    def __init__(self) -> None:
        self.now = 1_700_000_000_000
        self.data: Dict[str, str] = {}

    def __call__(self) -> int:
        return self.now

    def get(self, key: str):
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


def run_countdown_smoke() -> None:
    tape = _Tape()
    fired: List[int] = []
    clock = ClockEngine(store=tape, now_ms=tape, on_complete=lambda: fired.append(1))
    clock.set_mode(ClockMode.COUNT_DOWN)
    clock.edit_time(0, 0, 5)
    assert clock.start()

    seen = []
    for _ in range(8):
        tape.now += 1000
        seen.append(clock.tick())

    # invariants
    assert min(seen) >= 0, seen
    assert seen[:5] == [4, 3, 2, 1, 0], seen
    assert len(fired) == 1, fired
    assert not clock.running

    # a reload after a long gap recomputes from the anchor
    clock = ClockEngine(store=tape, now_ms=tape)
    clock.set_mode(ClockMode.COUNT_UP)
    clock.start()
    tape.now += 90_000
    restored = ClockEngine.restore(tape, now_ms=tape)
    assert restored.value == 90, restored.value

    print(f"OK countdown/reload: {seen} -> {format_hms(restored.value)}")


def run_calculator_smoke() -> None:
    t = REFERENCE_TABLE
    p = progress(10, 0, 12, 500, t)
    assert p.gained == t[10] + t[11] + 500
    assert progress(10, 800, 10, 500, t).gained == -300
    assert progress(12, 0, 10, 0, t).span is Span.LEVEL_DOWN
    assert rate_per_5min(100, 10) == 50
    assert rate_per_5min(100, 0) == 0
    print(f"OK calculators: gained={p.gained} start={p.start_pct}% end={p.end_pct}%")


if __name__ == "__main__":
    run_countdown_smoke()
    run_calculator_smoke()
