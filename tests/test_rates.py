from __future__ import annotations

import math

import pytest

from core.rates import currency_summary, elapsed_minutes, item_result, net_yield, rate_per_5min
from core.state import ItemResult, TrackedQuantity


def test_rate_per_5min_basic() -> None:
    assert rate_per_5min(100, 10) == 50
    assert isinstance(rate_per_5min(100, 10), int)


@pytest.mark.parametrize("minutes", [0, 0.0, -3])
def test_rate_per_5min_zero_guard(minutes: float) -> None:
    r = rate_per_5min(100, minutes)
    assert r == 0
    assert not (isinstance(r, float) and math.isnan(r))


def test_rate_rounding_half_up() -> None:
    # 7 per 10 min -> 3.5 per 5 min
    assert rate_per_5min(7, 10) == 4
    assert rate_per_5min(-7, 10) == -3
    assert rate_per_5min(1, 3, ndigits=2) == 1.67


def test_elapsed_minutes() -> None:
    assert elapsed_minutes(90) == 1.5
    assert elapsed_minutes(-10) == 0


def test_consumed_item_reduces_net_yield() -> None:
    potion = TrackedQuantity(name="elixir", start_count=5, end_count=2, unit_value=1000)
    res = item_result(potion, minutes=10)
    assert res.delta == -3
    assert res.value == -3000
    assert res.rate_per_5min == -1.5

    assert net_yield(10_000, [res]) == 7000


def test_item_rate_with_no_elapsed_time_is_zero() -> None:
    res = item_result(TrackedQuantity(name="x", start_count=0, end_count=10, unit_value=1), minutes=0)
    assert res.rate_per_5min == 0.0
    assert res.value == 10


def test_currency_summary_combines_raw_and_items() -> None:
    tracked = (
        TrackedQuantity(name="elixir", start_count=100, end_count=80, unit_value=500),
        TrackedQuantity(name="scroll", start_count=0, end_count=1, unit_value=40_000),
    )
    raw, net, items = currency_summary(1_000_000, 1_050_000, tracked, minutes=20)
    assert raw == 50_000
    assert [i.value for i in items] == [-10_000, 40_000]
    assert net == 80_000
    assert items[0] == ItemResult(name="elixir", delta=-20, rate_per_5min=-5.0, value=-10_000)


def test_currency_summary_without_items() -> None:
    raw, net, items = currency_summary(500, 200, (), minutes=5)
    assert (raw, net, items) == (-300, -300, [])
