"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly by avoiding real time.
It uses a tiny manual clock and an in-memory store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.clock import ClockEngine
from core.levels import REFERENCE_TABLE, ThresholdTable
from core.state import ClockMode, SessionInputs, TrackedQuantity

from .pipeline import assemble_record, compute_result
from .records import RecordBook
from .storage import MemoryStore


@dataclass
class ManualClock:
    """Deterministic time source (epoch ms) for tests; advance() instead of sleeping."""

    now: int = 1_700_000_000_000

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


def sample_inputs() -> SessionInputs:
    return SessionInputs(
        start_level=30,
        start_amount=90_000,
        start_currency=1_200_000,
        end_level=31,
        end_amount=40_000,
        end_currency=1_650_000,
        tracked=(
            TrackedQuantity(name="파워 엘릭서", start_count=120, end_count=95, unit_value=2_500),
            TrackedQuantity(name="주문서 60%", start_count=0, end_count=2, unit_value=150_000),
        ),
    )


def run_headless_session(
    minutes: int = 30,
    *,
    inputs: Optional[SessionInputs] = None,
    table: ThresholdTable = REFERENCE_TABLE,
    reload_every: int = 0,
) -> Dict[str, Any]:
    """Time a session on a manual clock, optionally 'reloading' the engine from
    storage every `reload_every` minutes, then compute and save a record."""
    clock = ManualClock()
    store = MemoryStore()
    engine = ClockEngine(store=store, now_ms=clock)
    engine.start(ClockMode.COUNT_UP)

    values: List[int] = []
    for minute in range(1, minutes + 1):
        clock.advance(60)
        values.append(engine.tick())
        if reload_every and minute % reload_every == 0:
            engine = ClockEngine.restore(store, now_ms=clock)

    engine.stop()
    duration = engine.value
    inputs = inputs or sample_inputs()
    result = compute_result(inputs, duration, table)

    book = RecordBook(store)
    rec = assemble_record(
        duration_seconds=duration,
        inputs=inputs,
        result=result,
        location="개미굴 2",
        note="headless",
        now_ms=clock.now,
    )
    book.add(rec)

    return {
        "minutes": minutes,
        "duration": duration,
        "values": values,
        "result": result,
        "record": rec,
        "store": store,
    }
