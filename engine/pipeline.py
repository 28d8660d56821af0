"""engine.pipeline

Session result flow (headless).

Responsibilities:
- SessionInputs + elapsed seconds + threshold table -> SessionResult
- SessionResult + frozen duration + metadata -> HuntingRecord

This layer is UI-agnostic and never mutates its inputs.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from core.levels import ThresholdTable
from core.progression import progress
from core.rates import currency_summary, elapsed_minutes, rate_per_5min
from core.state import HuntingRecord, SessionInputs, SessionResult

logger = logging.getLogger(__name__)


def compute_result(inputs: SessionInputs, elapsed_seconds: int, table: ThresholdTable) -> SessionResult:
    """Derive every session metric from raw start/end measurements."""
    minutes = elapsed_minutes(elapsed_seconds)

    prog = progress(
        int(inputs.start_level),
        int(inputs.start_amount),
        int(inputs.end_level),
        int(inputs.end_amount),
        table,
    )
    amount_rate: Optional[int] = None
    if prog.gained is not None:
        amount_rate = int(rate_per_5min(prog.gained, minutes))
    else:
        logger.debug(
            "level span %s -> %s is not supported; experience left blank",
            inputs.start_level,
            inputs.end_level,
        )

    raw, net, items = currency_summary(inputs.start_currency, inputs.end_currency, inputs.tracked, minutes)

    return SessionResult(
        level_delta=int(inputs.end_level) - int(inputs.start_level),
        span=prog.span.value,
        start_pct=prog.start_pct,
        end_pct=prog.end_pct,
        amount_gained=prog.gained,
        amount_rate_per_5min=amount_rate,
        currency_raw_delta=raw,
        currency_raw_rate_per_5min=int(rate_per_5min(raw, minutes)),
        currency_net_delta=net,
        currency_rate_per_5min=int(rate_per_5min(net, minutes)),
        items=tuple(items),
    )


def _now_ms() -> int:
    return int(time.time() * 1000)


def record_id(timestamp_ms: int) -> str:
    """Sortable, creation-time derived id: UTC timestamp to the millisecond + random suffix."""
    t = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return f"{t.strftime('%Y%m%d%H%M%S')}{timestamp_ms % 1000:03d}-{uuid.uuid4().hex[:6]}"


def assemble_record(
    *,
    duration_seconds: int,
    inputs: SessionInputs,
    result: SessionResult,
    location: str,
    note: str = "",
    now_ms: Optional[int] = None,
) -> HuntingRecord:
    """Freeze a finished session into a record. No recomputation happens here."""
    ts = int(now_ms) if now_ms is not None else _now_ms()
    rec = HuntingRecord(
        id=record_id(ts),
        timestamp_ms=ts,
        duration_seconds=max(0, int(duration_seconds)),
        location=str(location).strip(),
        inputs=inputs,
        result=result,
        note=str(note or "").strip(),
    )
    logger.info("Assembled record %s for %r (%ss)", rec.id, rec.location, rec.duration_seconds)
    return rec
