from __future__ import annotations

import json
from dataclasses import replace

from core.levels import ThresholdTable
from engine.pipeline import assemble_record, compute_result
from engine.records import (
    DEFAULT_RECORDS_KEY,
    RecordBook,
    dumps_records,
    format_duration,
    format_timestamp,
    gain_word,
    loads_records,
    record_from_mapping,
    record_to_dict,
)
from engine.sim_runner import sample_inputs
from engine.storage import MemoryStore


def _record(table: ThresholdTable, now_ms: int, location: str = "field"):
    inputs = sample_inputs()
    return assemble_record(
        duration_seconds=1800,
        inputs=inputs,
        result=compute_result(inputs, 1800, table),
        location=location,
        now_ms=now_ms,
    )


def test_record_survives_storage(table: ThresholdTable) -> None:
    rec = _record(table, 1_700_000_000_000)
    back = record_from_mapping(json.loads(json.dumps(record_to_dict(rec))))
    assert back == rec


def test_level_down_record_keeps_blank_experience(table: ThresholdTable) -> None:
    inputs = replace(sample_inputs(), start_level=31, end_level=30)
    rec = assemble_record(
        duration_seconds=60,
        inputs=inputs,
        result=compute_result(inputs, 60, table),
        location="x",
        now_ms=1,
    )
    back = loads_records(dumps_records([rec]))[0]
    assert back.result.amount_gained is None
    assert back.result.amount_rate_per_5min is None


def test_book_is_newest_first_and_persists(store: MemoryStore, table: ThresholdTable) -> None:
    book = RecordBook(store)
    first = _record(table, 1_000, "a")
    second = _record(table, 2_000, "b")
    book.add(first)
    book.add(second)

    assert [r.location for r in book.records] == ["b", "a"]
    assert len(book) == 2

    reloaded = RecordBook(store)
    assert [r.id for r in reloaded.records] == [second.id, first.id]


def test_book_add_same_id_replaces(store: MemoryStore, table: ThresholdTable) -> None:
    book = RecordBook(store)
    rec = _record(table, 1_000)
    book.add(rec)
    book.add(rec)
    assert len(book) == 1


def test_book_delete(store: MemoryStore, table: ThresholdTable) -> None:
    book = RecordBook(store)
    rec = _record(table, 1_000)
    book.add(rec)

    assert not book.delete("nope")
    assert book.delete(rec.id)
    assert book.records == []
    assert RecordBook(store).records == []


def test_records_property_is_a_copy(store: MemoryStore, table: ThresholdTable) -> None:
    book = RecordBook(store)
    book.add(_record(table, 1_000))
    book.records.clear()
    assert len(book) == 1


def test_unreadable_list_reads_as_empty(store: MemoryStore) -> None:
    store.set(DEFAULT_RECORDS_KEY, "{broken")
    assert RecordBook(store).records == []
    assert loads_records(None) == []
    assert loads_records('{"id": "x"}') == []


def test_bad_entries_are_skipped(table: ThresholdTable) -> None:
    good = record_to_dict(_record(table, 1_000))
    raw = json.dumps(
        [
            good,
            "not a record",
            {"timestamp_ms": 5},
            {"id": "  ", "timestamp_ms": 5},
            {"id": "x", "timestamp_ms": "later"},
            {"id": "inf", "timestamp_ms": float("inf")},
            {"id": "far", "timestamp_ms": 10**20},
            {"id": "neg", "timestamp_ms": -1},
        ]
    )
    out = loads_records(raw)
    assert [r.id for r in out] == [good["id"]]


def test_non_finite_numbers_do_not_break_the_book(store: MemoryStore) -> None:
    store.set(
        DEFAULT_RECORDS_KEY,
        '[{"id": "a", "timestamp_ms": Infinity}, {"id": "b", "timestamp_ms": 5, "duration_seconds": 1e400}]',
    )
    book = RecordBook(store)
    assert [r.id for r in book.records] == ["b"]
    assert book.records[0].duration_seconds == 0


def test_display_helpers() -> None:
    assert format_duration(3723) == "1시간 2분 3초"
    assert format_duration(-1) == "0시간 0분 0초"
    assert len(format_timestamp(1_700_000_000_000)) == len("2023.11.14 22:13")
    assert format_timestamp(10**20) == "-"
    assert gain_word(10) == "획득"
    assert gain_word(0) == "사용"
    assert gain_word(-10) == "사용"
