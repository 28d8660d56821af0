"""
core.modes
Clock mode specifications (labels / help text / direction).

Kept in core so behaviour flags live in one place, but UI can still display labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .state import ClockMode


@dataclass(frozen=True)
class ModeSpec:
    key: ClockMode
    label: str
    desc: str
    counts_down: bool
    start_label: str


DEFAULT_MODES: Dict[ClockMode, ModeSpec] = {
    ClockMode.COUNT_UP: ModeSpec(
        key=ClockMode.COUNT_UP,
        label="스톱워치",
        desc="0부터 올라갑니다. 사냥이 끝나면 정지하고 기록을 저장하세요.",
        counts_down=False,
        start_label="시작",
    ),
    ClockMode.COUNT_DOWN: ModeSpec(
        key=ClockMode.COUNT_DOWN,
        label="타이머",
        desc="설정한 시간부터 0까지 내려갑니다. 0이 되면 한 번 알림 후 자동 정지합니다.",
        counts_down=True,
        start_label="카운트다운 시작",
    ),
}


def get_mode_spec(mode: ClockMode) -> ModeSpec:
    return DEFAULT_MODES.get(mode, DEFAULT_MODES[ClockMode.COUNT_UP])
