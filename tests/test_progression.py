from __future__ import annotations

import pytest

from core.levels import REFERENCE_TABLE, ThresholdTable
from core.progression import Span, percentage, progress, round_half_up


def test_multi_level_span_sums_whole_levels_in_between(table: ThresholdTable) -> None:
    p = progress(10, 0, 12, 500, table)
    assert p.span is Span.LEVEL_UP
    assert p.gained == table[10] + table[11] + 500 == 3000


def test_multi_level_span_subtracts_start_amount(table: ThresholdTable) -> None:
    p = progress(10, 400, 11, 100, table)
    assert p.gained == (1000 - 400) + 100


def test_same_level_keeps_negative_sign(table: ThresholdTable) -> None:
    p = progress(10, 800, 10, 500, table)
    assert p.span is Span.SAME_LEVEL
    assert p.gained == -300
    assert p.supported


def test_level_down_is_reported_as_unsupported(table: ThresholdTable) -> None:
    p = progress(12, 100, 10, 900, table)
    assert p.span is Span.LEVEL_DOWN
    assert p.gained is None
    assert not p.supported
    # percentages are still meaningful on their own
    assert p.start_pct == 5.0
    assert p.end_pct == 90.0


def test_unknown_levels_in_span_count_as_zero(table: ThresholdTable) -> None:
    # 13 requires 0, 14 and 15 are missing from the table
    p = progress(12, 0, 16, 10, table)
    assert p.gained == 2000 + 0 + 0 + 0 + 10


def test_reference_table_span() -> None:
    t = REFERENCE_TABLE
    assert progress(10, 0, 12, 500, t).gained == 1716 + 2360 + 500
    assert len(t) == 200
    assert t[0] == 0
    assert t[201] == 0


@pytest.mark.parametrize(
    "amount, level, expected",
    [
        (500, 10, 50.0),
        (1, 12, 0.05),
        (1, 11, 0.07),  # 0.0666.. rounds up
        (0, 10, 0.0),
        (123, 13, 0.0),  # table says 0
        (123, 99, 0.0),  # not in table
    ],
)
def test_percentage(table: ThresholdTable, amount: int, level: int, expected: float) -> None:
    assert percentage(amount, level, table) == expected


def test_round_half_up_matches_js_math_round() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(1.004, 2) == 1.0


def test_table_iterates_levels_in_order() -> None:
    t = ThresholdTable({2: 34, 1: 15})
    assert t[1] == 15
    assert 3 not in t
    assert list(t) == [1, 2]
    assert list(REFERENCE_TABLE)[-1] == 200
