"""engine.records

Small helpers for keeping saved hunting records.

A record is JSON-serializable so the list can live under a single key of any
KeyValueStore. The list is kept newest-first; unreadable entries are skipped.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from content.parsing import try_parse_json
from content.schemas import as_int, inputs_from_mapping
from core.ports import KeyValueStore
from core.state import HuntingRecord, ItemResult, SessionResult

logger = logging.getLogger(__name__)

DEFAULT_RECORDS_KEY = "maple-timer-records"

# 9999-12-31T23:59:59.999Z
MAX_TIMESTAMP_MS = 253_402_300_799_999


def record_to_dict(rec: HuntingRecord) -> Dict[str, Any]:
    return asdict(rec)


def _timestamp_ms(x: Any) -> int:
    if isinstance(x, float) and not math.isfinite(x):
        raise ValueError(f"timestamp is not finite: {x!r}")
    ts = int(x)
    if not 0 <= ts <= MAX_TIMESTAMP_MS:
        raise ValueError(f"timestamp out of range: {ts}")
    return ts


def _opt_int(x: Any) -> Optional[int]:
    return None if x is None else as_int(x)


def result_from_mapping(d: Mapping[str, Any]) -> SessionResult:
    items = []
    for it in list(d.get("items") or []):
        if not isinstance(it, Mapping):
            continue
        items.append(
            ItemResult(
                name=str(it.get("name") or ""),
                delta=as_int(it.get("delta")),
                rate_per_5min=float(it.get("rate_per_5min") or 0.0),
                value=as_int(it.get("value")),
            )
        )
    return SessionResult(
        level_delta=as_int(d.get("level_delta")),
        span=str(d.get("span") or ""),
        start_pct=float(d.get("start_pct") or 0.0),
        end_pct=float(d.get("end_pct") or 0.0),
        amount_gained=_opt_int(d.get("amount_gained")),
        amount_rate_per_5min=_opt_int(d.get("amount_rate_per_5min")),
        currency_raw_delta=as_int(d.get("currency_raw_delta")),
        currency_raw_rate_per_5min=as_int(d.get("currency_raw_rate_per_5min")),
        currency_net_delta=as_int(d.get("currency_net_delta")),
        currency_rate_per_5min=as_int(d.get("currency_rate_per_5min")),
        items=tuple(items),
    )


def record_from_mapping(d: Mapping[str, Any]) -> HuntingRecord:
    """Inverse of record_to_dict. Raises KeyError/TypeError/ValueError on bad shapes."""
    rid = str(d["id"]).strip()
    if not rid:
        raise ValueError("record id is empty")
    return HuntingRecord(
        id=rid,
        timestamp_ms=_timestamp_ms(d["timestamp_ms"]),
        duration_seconds=max(0, as_int(d.get("duration_seconds"))),
        location=str(d.get("location") or ""),
        inputs=inputs_from_mapping(dict(d.get("inputs") or {})),
        result=result_from_mapping(dict(d.get("result") or {})),
        note=str(d.get("note") or ""),
    )


def dumps_records(records: List[HuntingRecord]) -> str:
    return json.dumps([record_to_dict(r) for r in records], ensure_ascii=False, sort_keys=True)


def loads_records(raw: Optional[str]) -> List[HuntingRecord]:
    res = try_parse_json(raw, list)
    if not res.ok:
        if raw is not None:
            logger.warning("Ignoring unreadable record list: %s", res.error)
        return []
    out: List[HuntingRecord] = []
    for i, item in enumerate(res.data):
        if not isinstance(item, Mapping):
            logger.warning("Skipping record #%d: not an object", i)
            continue
        try:
            out.append(record_from_mapping(item))
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            logger.warning("Skipping record #%d: %s: %s", i, type(e).__name__, e)
    return out


class RecordBook:
    """Newest-first record list persisted under one key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_RECORDS_KEY) -> None:
        self._store = store
        self._key = key
        self._records: List[HuntingRecord] = loads_records(store.get(key))

    @property
    def records(self) -> List[HuntingRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def add(self, rec: HuntingRecord) -> None:
        self._records = [rec, *[r for r in self._records if r.id != rec.id]]
        self._save()
        logger.info("Saved record %s (%d total)", rec.id, len(self._records))

    def delete(self, record_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        if len(self._records) == before:
            return False
        self._save()
        logger.info("Deleted record %s", record_id)
        return True

    def _save(self) -> None:
        self._store.set(self._key, dumps_records(self._records))


# =========================
# Display helpers
# =========================


def format_duration(seconds: int) -> str:
    s = max(0, int(seconds))
    return f"{s // 3600}시간 {(s % 3600) // 60}분 {s % 60}초"


def format_timestamp(timestamp_ms: int) -> str:
    try:
        return datetime.fromtimestamp(int(timestamp_ms) / 1000).strftime("%Y.%m.%d %H:%M")
    except (OverflowError, OSError, ValueError) as e:
        logger.warning("Cannot display timestamp %r: %s", timestamp_ms, e)
        return "-"


def gain_word(delta: float) -> str:
    return "획득" if delta > 0 else "사용"
