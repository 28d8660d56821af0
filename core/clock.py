"""
core.clock
Session clock: count-up stopwatch or count-down timer.

The running value is never accumulated tick by tick. It is always derived from
an absolute anchor (epoch ms) and the current time:

- count-up:   value = floor((now - anchor) / 1000)
- count-down: value = ceil((anchor - now) / 1000), clamped at 0

so a throttled tab, a sleeping laptop or a full reload only means the next tick
lands later; the value it computes is still right.

Every transition (and every tick while running) writes a snapshot through the
injected KeyValueStore. Rejected calls (editing while running, reset without
confirmation, ...) return False instead of raising.
"""

from __future__ import annotations

import json
import logging
import math
import time
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple, Union

from .ports import CompletionNotifier, KeyValueStore, NowMs, ValueListener
from .state import ClockMode, ClockState, clamp, default_clock_state

logger = logging.getLogger(__name__)

DEFAULT_CLOCK_KEY = "maple-timer-clock"

MAX_HOURS = 99
MAX_MINUTES = 59
MAX_SECONDS = 59


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def split_hms(total_seconds: int) -> Tuple[int, int, int]:
    s = max(0, int(total_seconds))
    return s // 3600, (s % 3600) // 60, s % 60


def format_hms(total_seconds: int) -> str:
    h, m, s = split_hms(total_seconds)
    return f"{h:02d}:{m:02d}:{s:02d}"


def derive_seconds(state: ClockState, now_ms: int) -> int:
    """Displayed value of `state` at `now_ms`."""
    if not state.running or state.anchor_ms is None:
        return max(0, int(state.seconds))
    diff = int(now_ms) - int(state.anchor_ms)
    if state.mode is ClockMode.COUNT_UP:
        return max(0, diff // 1000)
    # ceil((anchor - now) / 1000) without floats
    return max(0, -(diff // 1000))


def _as_non_negative_int(x: Any) -> Optional[int]:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return None
    if not math.isfinite(x) or x < 0:
        return None
    return int(x)


def _as_field(x: Any) -> int:
    """Lenient int for a manual time field; anything unreadable counts as 0."""
    if isinstance(x, bool):
        return int(x)
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        return int(x) if math.isfinite(x) else 0
    try:
        return int(str(x).strip())
    except ValueError:
        return 0


def decode_snapshot(raw: Optional[str]) -> Optional[ClockState]:
    """Parse a persisted snapshot. Returns None for anything malformed."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None

    try:
        mode = ClockMode(str(data.get("mode")))
    except ValueError:
        return None

    seconds = _as_non_negative_int(data.get("seconds", 0))
    running = data.get("running", False)
    anchor_raw = data.get("anchor")
    if seconds is None or not isinstance(running, bool):
        return None

    anchor: Optional[int] = None
    if anchor_raw is not None:
        anchor = _as_non_negative_int(anchor_raw)
        if anchor is None:
            return None
    if running and anchor is None:
        return None

    # older snapshots carry no target; the stored value is the best guess
    target = _as_non_negative_int(data.get("target", seconds))
    if target is None:
        target = seconds

    return ClockState(
        mode=mode,
        anchor_ms=anchor if running else None,
        seconds=seconds,
        running=running,
        target_seconds=max(target, seconds) if mode is ClockMode.COUNT_DOWN else 0,
    )


class ClockEngine:
    """Two-state machine: Stopped(value) / Running(mode, anchor).

    Mode switches and manual edits are only legal while stopped.
    """

    def __init__(
        self,
        state: Optional[ClockState] = None,
        *,
        store: Optional[KeyValueStore] = None,
        key: str = DEFAULT_CLOCK_KEY,
        now_ms: Optional[NowMs] = None,
        on_change: Optional[ValueListener] = None,
        on_complete: Optional[CompletionNotifier] = None,
    ) -> None:
        self._state = state or default_clock_state()
        self._store = store
        self._key = key
        self._now = now_ms or wall_clock_ms
        self.on_change = on_change
        self.on_complete = on_complete
        # None = unknown previous value (fresh restore of a running clock)
        self._last_value: Optional[int] = None if self._state.running else self._state.seconds

    # -------------------------
    # Construction from storage
    # -------------------------

    @classmethod
    def restore(
        cls,
        store: KeyValueStore,
        key: str = DEFAULT_CLOCK_KEY,
        *,
        now_ms: Optional[NowMs] = None,
        on_change: Optional[ValueListener] = None,
        on_complete: Optional[CompletionNotifier] = None,
    ) -> "ClockEngine":
        """Rebuild a clock from its last snapshot.

        A running snapshot keeps only its anchor; the value is re-derived from
        the current time, whatever `seconds` the snapshot cached.
        """
        raw = store.get(key)
        state = decode_snapshot(raw)
        if state is None:
            if raw is not None:
                logger.warning("Discarding malformed clock snapshot under %r", key)
                store.remove(key)
            state = default_clock_state()
        elif state.running:
            logger.info("Resuming running %s clock from anchor %s", state.mode.value, state.anchor_ms)
        return cls(state, store=store, key=key, now_ms=now_ms, on_change=on_change, on_complete=on_complete)

    # -------------------------
    # Read side
    # -------------------------

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def mode(self) -> ClockMode:
        return self._state.mode

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def value(self) -> int:
        return derive_seconds(self._state, self._now())

    @property
    def elapsed(self) -> int:
        """Session time so far: the value in count-up, target minus remaining in count-down."""
        value = self.value
        if self._state.mode is ClockMode.COUNT_DOWN:
            return max(0, int(self._state.target_seconds) - value)
        return value

    def snapshot(self) -> Dict[str, Any]:
        return self._state.to_snapshot()

    # -------------------------
    # Transitions
    # -------------------------

    def start(self, mode: Optional[Union[ClockMode, str]] = None) -> bool:
        """Run from the current value. A different `mode` is applied first (zeroing the value)."""
        if self._state.running:
            logger.debug("start ignored: clock already running")
            return False
        if mode is not None and not self.set_mode(mode):
            return False

        seconds = int(self._state.seconds)
        now = self._now()
        if self._state.mode is ClockMode.COUNT_DOWN:
            if seconds <= 0:
                logger.debug("start ignored: countdown has no time set")
                return False
            anchor = now + seconds * 1000
        else:
            anchor = now - seconds * 1000

        target = max(int(self._state.target_seconds), seconds) if self._state.mode is ClockMode.COUNT_DOWN else 0
        self._state = replace(self._state, anchor_ms=anchor, seconds=seconds, running=True, target_seconds=target)
        self._last_value = seconds
        logger.info("Clock started (%s) at %s", self._state.mode.value, format_hms(seconds))
        self._commit(seconds)
        return True

    def stop(self) -> bool:
        if not self._state.running:
            logger.debug("stop ignored: clock not running")
            return False
        value = self.tick()
        if not self._state.running:
            # the tick above finished a countdown
            return True
        self._state = replace(self._state, anchor_ms=None, seconds=value, running=False)
        self._last_value = value
        logger.info("Clock stopped at %s", format_hms(value))
        self._commit(value)
        return True

    def reset(self, confirmed: bool = False) -> bool:
        if not confirmed:
            logger.debug("reset ignored: not confirmed")
            return False
        self._state = default_clock_state(self._state.mode)
        self._last_value = 0
        logger.info("Clock reset")
        self._commit(0)
        return True

    def set_mode(self, mode: Union[ClockMode, str]) -> bool:
        if self._state.running:
            logger.debug("set_mode ignored: clock running")
            return False
        try:
            new_mode = ClockMode(mode)
        except ValueError:
            logger.debug("set_mode ignored: unknown mode %r", mode)
            return False
        if new_mode is self._state.mode:
            return True
        self._state = default_clock_state(new_mode)
        self._last_value = 0
        logger.info("Clock mode -> %s", new_mode.value)
        self._commit(0)
        return True

    def edit_time(self, hours: int, minutes: int, seconds: int) -> bool:
        """Set the stopped value. Each field is clamped independently."""
        if self._state.running:
            logger.debug("edit_time ignored: clock running")
            return False
        h = clamp(_as_field(hours), 0, MAX_HOURS)
        m = clamp(_as_field(minutes), 0, MAX_MINUTES)
        s = clamp(_as_field(seconds), 0, MAX_SECONDS)
        total = h * 3600 + m * 60 + s
        target = total if self._state.mode is ClockMode.COUNT_DOWN else 0
        self._state = replace(self._state, anchor_ms=None, seconds=total, running=False, target_seconds=target)
        self._last_value = total
        self._commit(total)
        return True

    def tick(self) -> int:
        """Recompute the value from the anchor. Finishes a countdown that reached 0."""
        value = self.value
        if not self._state.running:
            return value

        if self._state.mode is ClockMode.COUNT_DOWN and value == 0:
            crossed = self._last_value is None or self._last_value > 0
            self._state = replace(self._state, anchor_ms=None, seconds=0, running=False)
            self._last_value = 0
            logger.info("Countdown finished")
            self._commit(0)
            if crossed:
                self._fire_complete()
            return 0

        self._last_value = value
        self._state = replace(self._state, seconds=value)
        logger.debug("tick %s", value)
        self._commit(value)
        return value

    # -------------------------
    # Side effects
    # -------------------------

    def _commit(self, value: int) -> None:
        if self._store is not None:
            self._store.set(self._key, json.dumps(self.snapshot()))
        if self.on_change is not None:
            self.on_change(int(value))

    def _fire_complete(self) -> None:
        if self.on_complete is None:
            return
        try:
            self.on_complete()
        except Exception:
            logger.exception("Completion notifier failed")
