from __future__ import annotations

import pytest

from core.levels import REFERENCE_TABLE
from core.selfcheck import run_calculator_smoke, run_countdown_smoke
from engine.records import RecordBook
from engine.sim_runner import ManualClock, run_headless_session


@pytest.mark.parametrize("reload_every", [0, 1, 7])
def test_headless_session_duration_survives_reloads(reload_every: int) -> None:
    out = run_headless_session(30, reload_every=reload_every)
    assert out["duration"] == 30 * 60
    assert out["values"] == [60 * m for m in range(1, 31)]


def test_headless_session_saves_one_record() -> None:
    out = run_headless_session(10)
    rec = out["record"]
    assert rec.duration_seconds == 600
    assert rec.location == "개미굴 2"

    book = RecordBook(out["store"])
    assert [r.id for r in book.records] == [rec.id]


def test_headless_session_result() -> None:
    res = run_headless_session(30)["result"]
    assert res.span == "level_up"
    assert res.amount_gained == REFERENCE_TABLE[30] - 90_000 + 40_000
    assert res.currency_raw_delta == 450_000
    # 25 elixirs used at 2,500, 2 scrolls found at 150,000
    assert res.currency_net_delta == 450_000 - 62_500 + 300_000


def test_manual_clock_advance() -> None:
    c = ManualClock(now=0)
    c.advance(1.5)
    assert c() == 1500


def test_selfcheck_smoke(capsys: pytest.CaptureFixture) -> None:
    run_countdown_smoke()
    run_calculator_smoke()
    out = capsys.readouterr().out
    assert "OK countdown/reload" in out
    assert "OK calculators" in out
