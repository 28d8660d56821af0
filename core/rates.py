"""
core.rates
Per-5-minute rates and net currency yield.

Every rate shares one zero-elapsed guard: no elapsed time -> rate 0.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .progression import round_half_up
from .state import ItemResult, TrackedQuantity

RATE_WINDOW_MINUTES = 5


def elapsed_minutes(seconds: int) -> float:
    return max(0, int(seconds)) / 60.0


def rate_per_5min(delta: float, minutes: float, ndigits: int = 0) -> float:
    """delta per 5 minutes, rounded half-up. ndigits=0 returns an int."""
    if minutes <= 0:
        return 0 if ndigits == 0 else 0.0
    r = round_half_up(delta / minutes * RATE_WINDOW_MINUTES, ndigits)
    return int(r) if ndigits == 0 else r


def item_result(q: TrackedQuantity, minutes: float) -> ItemResult:
    delta = int(q.end_count) - int(q.start_count)
    return ItemResult(
        name=str(q.name),
        delta=delta,
        rate_per_5min=float(rate_per_5min(delta, minutes, ndigits=2)),
        value=delta * int(q.unit_value),
    )


def item_results(tracked: Iterable[TrackedQuantity], minutes: float) -> List[ItemResult]:
    return [item_result(q, minutes) for q in tracked]


def net_yield(raw_delta: int, items: Sequence[ItemResult]) -> int:
    """Raw currency delta plus the signed value of every tracked item."""
    return int(raw_delta) + sum(int(it.value) for it in items)


def currency_summary(
    start_currency: int,
    end_currency: int,
    tracked: Iterable[TrackedQuantity],
    minutes: float,
) -> Tuple[int, int, List[ItemResult]]:
    """Return (raw_delta, net_delta, item_results)."""
    raw = int(end_currency) - int(start_currency)
    items = item_results(tracked, minutes)
    return raw, net_yield(raw, items), items
