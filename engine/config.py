"""engine.config

App configuration passed from UI.

Values come from Streamlit secrets or the environment (the app decides the
order); anything missing or invalid falls back to the defaults below.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_STATE_DIR = "HUNT_TIMER_STATE_DIR"
ENV_TICK_SECONDS = "HUNT_TIMER_TICK_SECONDS"
ENV_LOG_LEVEL = "HUNT_TIMER_LOG_LEVEL"

DEFAULT_STATE_DIR = Path(__file__).resolve().parents[1] / "ui_state"
DEFAULT_TICK_SECONDS = 1.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_STORAGE_PREFIX = "maple-timer"


@dataclass(frozen=True)
class AppConfig:
    state_dir: Path = DEFAULT_STATE_DIR
    tick_seconds: float = DEFAULT_TICK_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL
    storage_prefix: str = DEFAULT_STORAGE_PREFIX

    @property
    def state_file(self) -> Path:
        return self.state_dir / "storage.json"

    def storage_key(self, name: str) -> str:
        return f"{self.storage_prefix}-{name}"

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ

        state_dir = DEFAULT_STATE_DIR
        raw_dir = str(env.get(ENV_STATE_DIR, "") or "").strip()
        if raw_dir:
            state_dir = Path(raw_dir).expanduser()

        tick = DEFAULT_TICK_SECONDS
        raw_tick = str(env.get(ENV_TICK_SECONDS, "") or "").strip()
        if raw_tick:
            try:
                tick = float(raw_tick)
            except ValueError:
                tick = DEFAULT_TICK_SECONDS
            if not 0.1 <= tick <= 60.0:
                tick = DEFAULT_TICK_SECONDS

        level = str(env.get(ENV_LOG_LEVEL, "") or "").strip().upper() or DEFAULT_LOG_LEVEL
        if not isinstance(logging.getLevelName(level), int):
            level = DEFAULT_LOG_LEVEL

        return AppConfig(state_dir=state_dir, tick_seconds=tick, log_level=level)


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
