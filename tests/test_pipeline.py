from __future__ import annotations

import re
from dataclasses import replace

from core.levels import ThresholdTable
from core.state import SessionInputs, TrackedQuantity
from engine.pipeline import assemble_record, compute_result, record_id


def _inputs(**kw) -> SessionInputs:
    base = SessionInputs(
        start_level=10,
        start_amount=0,
        start_currency=1000,
        end_level=12,
        end_amount=500,
        end_currency=3000,
        tracked=(TrackedQuantity(name="potion", start_count=5, end_count=2, unit_value=100),),
    )
    return replace(base, **kw)


def test_compute_result_over_ten_minutes(table: ThresholdTable) -> None:
    res = compute_result(_inputs(), 600, table)

    assert res.level_delta == 2
    assert res.span == "level_up"
    assert res.amount_gained == 3000
    assert res.amount_rate_per_5min == 1500

    assert res.currency_raw_delta == 2000
    assert res.currency_raw_rate_per_5min == 1000
    assert res.currency_net_delta == 1700
    assert res.currency_rate_per_5min == 850

    (potion,) = res.items
    assert potion.delta == -3
    assert potion.value == -300
    assert potion.rate_per_5min == -1.5


def test_compute_result_with_no_elapsed_time_has_zero_rates(table: ThresholdTable) -> None:
    res = compute_result(_inputs(), 0, table)
    assert res.amount_gained == 3000
    assert res.amount_rate_per_5min == 0
    assert res.currency_rate_per_5min == 0
    assert res.currency_raw_rate_per_5min == 0
    assert res.items[0].rate_per_5min == 0.0


def test_compute_result_level_down_leaves_experience_blank(table: ThresholdTable) -> None:
    res = compute_result(_inputs(start_level=12, end_level=10), 600, table)
    assert res.span == "level_down"
    assert res.level_delta == -2
    assert res.amount_gained is None
    assert res.amount_rate_per_5min is None
    # currency is unaffected by the level span
    assert res.currency_net_delta == 1700


def test_compute_result_same_level(table: ThresholdTable) -> None:
    res = compute_result(_inputs(end_level=10, start_amount=800, end_amount=500, tracked=()), 300, table)
    assert res.span == "same_level"
    assert res.amount_gained == -300
    assert res.amount_rate_per_5min == -300
    assert res.currency_net_delta == res.currency_raw_delta == 2000


def test_assemble_record_freezes_inputs_and_result(table: ThresholdTable) -> None:
    inputs = _inputs()
    result = compute_result(inputs, 600, table)

    rec = assemble_record(
        duration_seconds=600,
        inputs=inputs,
        result=result,
        location="  Ant Tunnel 2 ",
        note=" slow channel\n",
        now_ms=1_700_000_000_123,
    )

    assert rec.inputs is inputs
    assert rec.result is result
    assert rec.location == "Ant Tunnel 2"
    assert rec.note == "slow channel"
    assert rec.duration_seconds == 600
    assert rec.timestamp_ms == 1_700_000_000_123
    assert rec.id.startswith("20231114221320123-")


def test_assemble_record_clamps_negative_duration(table: ThresholdTable) -> None:
    inputs = _inputs()
    rec = assemble_record(
        duration_seconds=-5,
        inputs=inputs,
        result=compute_result(inputs, 0, table),
        location="x",
    )
    assert rec.duration_seconds == 0
    assert rec.note == ""
    assert rec.timestamp_ms > 0


def test_record_ids_are_unique_and_sortable() -> None:
    a = record_id(1_700_000_000_000)
    b = record_id(1_700_000_000_000)
    c = record_id(1_700_000_001_000)
    assert a != b
    assert re.fullmatch(r"\d{17}-[0-9a-f]{6}", a)
    assert max(a, b) < c
