"""Maple Hunt Timer (Streamlit)

Principles:
- UI only renders + triggers.
- Clock and calculators are pure Python modules (core/, engine/).
- Everything the user enters is persisted through one KeyValueStore, so a
  browser reload (new Streamlit session) picks up where it left off,
  including a clock that kept running meanwhile.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List

import streamlit as st

from content.parsing import parse_list, parse_object
from content.schemas import FORM_FIELDS, ItemRow, SessionForm, form_from_mapping, inputs_from_form, rows_from_list
from core.clock import MAX_HOURS, MAX_MINUTES, MAX_SECONDS, ClockEngine, format_hms, split_hms
from core.levels import REFERENCE_TABLE
from core.modes import DEFAULT_MODES, get_mode_spec
from core.state import HuntingRecord, SessionResult
from engine.config import ENV_LOG_LEVEL, ENV_STATE_DIR, ENV_TICK_SECONDS, AppConfig, configure_logging
from engine.pipeline import assemble_record, compute_result
from engine.records import RecordBook, format_duration, format_timestamp, gain_word
from engine.storage import JsonFileStore

logger = logging.getLogger(__name__)

APP_TITLE = "메이플랜드 사냥 타이머"
APP_VERSION = "1.2.0"

st.set_page_config(page_title=APP_TITLE, page_icon="⏱️", layout="wide")

CSS = """
<style>
.block-container {padding-top: 2.4rem; padding-bottom: 2rem;}
.clock {
  font-family: ui-monospace, SFMono-Regular, Menlo, monospace;
  font-size: 56px;
  font-weight: 700;
  text-align: center;
  letter-spacing: 2px;
}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)

FORM_LABELS: Dict[str, str] = {
    "start_level": "레벨",
    "start_exp": "경험치",
    "start_meso": "메소",
    "end_level": "레벨",
    "end_exp": "경험치",
    "end_meso": "메소",
}


# =========================
# Helpers
# =========================


def _secret_or_env(name: str) -> str:
    # Streamlit Cloud: st.secrets
    try:
        has_secret = name in st.secrets
    except FileNotFoundError:
        # no secrets.toml when running locally
        has_secret = False
    if has_secret:
        return str(st.secrets[name])
    # Local
    return os.getenv(name) or ""


def _load_config() -> AppConfig:
    env = {n: _secret_or_env(n) for n in (ENV_STATE_DIR, ENV_TICK_SECONDS, ENV_LOG_LEVEL)}
    return AppConfig.from_env(env)


def _key(name: str) -> str:
    cfg: AppConfig = st.session_state.config
    return cfg.storage_key(name)


def _on_countdown_complete() -> None:
    # rendered on the next full run (a fragment rerun would swallow it)
    st.session_state.countdown_done = True


def _fmt(n: Any) -> str:
    return f"{int(n):,}"


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "config" not in ss:
        ss.config = _load_config()
        configure_logging(ss.config)
        logger.info("Session started (state dir %s)", ss.config.state_dir)
    if "store" not in ss:
        ss.store = JsonFileStore(ss.config.state_file)

    if "clock" not in ss:
        ss.clock = ClockEngine.restore(ss.store, _key("clock"), on_complete=_on_countdown_complete)
    if "countdown_done" not in ss:
        ss.countdown_done = False

    if "form" not in ss:
        ss.form = form_from_mapping(parse_object(ss.store.get(_key("stats"))))
        for f in FORM_FIELDS:
            ss[f"f_{f}"] = getattr(ss.form, f)
    if "rows" not in ss:
        ss.rows = rows_from_list(parse_list(ss.store.get(_key("items"))))
        ss.rows_base = [r.to_dict() for r in ss.rows]
        ss.editor_gen = 0

    if "book" not in ss:
        ss.book = RecordBook(ss.store, _key("records"))
    if "flash" not in ss:
        ss.flash = ""


def _persist_form(form: SessionForm) -> None:
    ss = st.session_state
    if form != ss.form:
        ss.form = form
        ss.store.set(_key("stats"), _dumps(form.to_dict()))


def _persist_rows(rows: List[ItemRow]) -> None:
    ss = st.session_state
    if rows != ss.rows:
        ss.rows = rows
        ss.store.set(_key("items"), _dumps([r.to_dict() for r in rows]))


def _dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False)


# =========================
# Callbacks
# =========================


def _on_mode_change() -> None:
    ss = st.session_state
    ss.clock.set_mode(ss.mode_radio)


def _on_apply_time() -> None:
    ss = st.session_state
    ss.clock.edit_time(ss.edit_h or 0, ss.edit_m or 0, ss.edit_s or 0)


def _on_start_stop() -> None:
    clock: ClockEngine = st.session_state.clock
    if clock.running:
        clock.stop()
    elif not clock.start():
        st.session_state.flash = "카운트다운 시간을 먼저 설정하세요."


def _on_clock_reset() -> None:
    ss = st.session_state
    if ss.clock.reset(confirmed=bool(ss.get("confirm_clock_reset"))):
        ss.confirm_clock_reset = False
    else:
        ss.flash = "리셋하려면 먼저 확인란을 체크하세요."


def _on_form_reset() -> None:
    ss = st.session_state
    if not ss.get("confirm_form_reset"):
        ss.flash = "초기화하려면 먼저 확인란을 체크하세요."
        return
    for f in FORM_FIELDS:
        ss[f"f_{f}"] = ""
    _persist_form(SessionForm())
    _persist_rows([])
    ss.rows_base = []
    ss.editor_gen += 1
    ss.confirm_form_reset = False


def _on_save() -> None:
    ss = st.session_state
    form: SessionForm = ss.form
    if not form.location.strip():
        ss.flash = "사냥터 이름을 입력해주세요."
        return

    clock: ClockEngine = ss.clock
    duration = clock.elapsed
    inputs = inputs_from_form(form, ss.rows)
    result = compute_result(inputs, duration, REFERENCE_TABLE)
    rec = assemble_record(
        duration_seconds=duration,
        inputs=inputs,
        result=result,
        location=form.location,
        note=str(ss.get("note", "") or ""),
    )
    ss.book.add(rec)
    ss.note = ""
    ss.flash = f"'{rec.location}' 기록을 저장했습니다."


def _on_delete(record_id: str) -> None:
    ss = st.session_state
    if not ss.get(f"confirm_del_{record_id}"):
        ss.flash = "삭제하려면 먼저 확인란을 체크하세요."
        return
    ss.book.delete(record_id)


# =========================
# UI blocks
# =========================


def render_clock() -> None:
    ss = st.session_state
    clock: ClockEngine = ss.clock
    cfg: AppConfig = ss.config
    spec = get_mode_spec(clock.mode)

    st.subheader("타이머")

    modes = list(DEFAULT_MODES.keys())
    st.radio(
        "모드",
        modes,
        index=modes.index(clock.mode),
        format_func=lambda m: DEFAULT_MODES[m].label,
        horizontal=True,
        key="mode_radio",
        on_change=_on_mode_change,
        disabled=clock.running,
    )
    st.caption(spec.desc)

    @st.fragment(run_every=cfg.tick_seconds if clock.running else None)
    def _face() -> None:
        was_running = clock.running
        value = clock.tick()
        st.markdown(f"<div class='clock'>{format_hms(value)}</div>", unsafe_allow_html=True)
        st.caption("남은 시간" if spec.counts_down else "경과 시간")
        if was_running and not clock.running:
            # countdown finished: full rerun so controls unlock and the timer stops
            st.rerun()

    _face()

    c1, c2 = st.columns(2)
    with c1:
        st.button(
            "정지" if clock.running else spec.start_label,
            on_click=_on_start_stop,
            type="primary",
            use_container_width=True,
        )
    with c2:
        st.button("리셋", on_click=_on_clock_reset, use_container_width=True)
    st.checkbox("리셋 확인", key="confirm_clock_reset")

    with st.expander("시간 직접 입력 (정지 상태에서만)", expanded=False):
        h, m, s = split_hms(clock.value)
        e1, e2, e3 = st.columns(3)
        e1.number_input("시", min_value=0, max_value=MAX_HOURS, value=min(h, MAX_HOURS), step=1, key="edit_h", disabled=clock.running)
        e2.number_input("분", min_value=0, max_value=MAX_MINUTES, value=m, step=1, key="edit_m", disabled=clock.running)
        e3.number_input("초", min_value=0, max_value=MAX_SECONDS, value=s, step=1, key="edit_s", disabled=clock.running)
        st.button("시간 설정", on_click=_on_apply_time, disabled=clock.running, use_container_width=True)


def render_form() -> SessionForm:
    ss = st.session_state
    head, btn = st.columns([3, 1])
    head.subheader("사냥 입력")
    with btn:
        st.button("초기화", on_click=_on_form_reset, use_container_width=True)
        st.checkbox("초기화 확인", key="confirm_form_reset")

    st.text_input("사냥터", key="f_location", placeholder="사냥터 이름을 입력하세요")

    left, right = st.columns(2)
    with left:
        st.markdown("**시작**")
        for f in ("start_level", "start_exp", "start_meso"):
            st.text_input(FORM_LABELS[f], key=f"f_{f}")
    with right:
        st.markdown("**종료**")
        for f in ("end_level", "end_exp", "end_meso"):
            st.text_input(FORM_LABELS[f], key=f"f_{f}")

    form = SessionForm(**{f: str(ss.get(f"f_{f}", "") or "") for f in FORM_FIELDS})
    _persist_form(form)
    return form


def render_items() -> None:
    ss = st.session_state
    st.markdown("**아이템 변동**")
    edited = st.data_editor(
        ss.rows_base,
        num_rows="dynamic",
        hide_index=True,
        use_container_width=True,
        column_order=["name", "start_count", "end_count", "price"],
        column_config={
            "name": st.column_config.TextColumn("이름"),
            "start_count": st.column_config.TextColumn("시작 개수"),
            "end_count": st.column_config.TextColumn("종료 개수"),
            "price": st.column_config.TextColumn("개당 가격"),
        },
        key=f"items_editor_{ss.editor_gen}",
    )
    if hasattr(edited, "to_dict"):
        edited = edited.to_dict("records")
    _persist_rows(rows_from_list(edited))


def _render_result(result: SessionResult, start_level: int, end_level: int) -> None:
    st.markdown(f"**레벨 업: {result.level_delta} 레벨**")
    st.markdown(
        f"- 시작: Lv.{start_level} ({result.start_pct:.2f}%)\n"
        f"- 종료: Lv.{end_level} ({result.end_pct:.2f}%)"
    )

    st.markdown("**경험치**")
    if result.amount_gained is None:
        st.warning("종료 레벨이 시작 레벨보다 낮은 구간은 계산하지 않습니다.")
    else:
        st.markdown(f"- 총 획득: {_fmt(result.amount_gained)}\n- 5분당: {_fmt(result.amount_rate_per_5min or 0)}")

    st.markdown("**메소**")
    st.markdown(
        f"- 총 획득: {_fmt(result.currency_raw_delta)} 메소\n"
        f"- 5분당: {_fmt(result.currency_raw_rate_per_5min)} 메소"
    )

    if result.items:
        st.markdown("**아이템**")
        for it in result.items:
            word = gain_word(it.delta)
            st.markdown(
                f"- {it.name or '(이름 없음)'}: 총 {word} {_fmt(abs(it.delta))}개 · "
                f"5분당 {word} {abs(it.rate_per_5min):,.2f}개 · 가치 {_fmt(it.value)} 메소"
            )

    st.markdown("**순수익**")
    st.markdown(
        f"- 총 순수익: **{_fmt(result.currency_net_delta)} 메소**\n"
        f"- 5분당 순수익: **{_fmt(result.currency_rate_per_5min)} 메소**"
    )


def render_results(form: SessionForm) -> None:
    ss = st.session_state
    clock: ClockEngine = ss.clock
    cfg: AppConfig = ss.config

    @st.fragment(run_every=cfg.tick_seconds if clock.running else None)
    def _live() -> None:
        inputs = inputs_from_form(form, ss.rows)
        result = compute_result(inputs, clock.elapsed, REFERENCE_TABLE)
        with st.container(border=True):
            st.markdown("#### 결과")
            _render_result(result, inputs.start_level, inputs.end_level)

    _live()

    st.text_area("메모", key="note", height=80)
    st.button("기록 저장", on_click=_on_save, type="primary")


def render_records() -> None:
    ss = st.session_state
    book: RecordBook = ss.book
    st.subheader("사냥 기록 목록")

    records: List[HuntingRecord] = book.records
    if not records:
        st.info("저장된 사냥 기록이 없습니다.")
        return

    for rec in records:
        title = f"{rec.location} · {format_timestamp(rec.timestamp_ms)} · {format_duration(rec.duration_seconds)}"
        with st.expander(title):
            _render_result(rec.result, rec.inputs.start_level, rec.inputs.end_level)
            if rec.note:
                st.caption(f"메모: {rec.note}")
            d1, d2 = st.columns([1, 1])
            d1.checkbox("삭제 확인", key=f"confirm_del_{rec.id}")
            d2.button("삭제", key=f"del_{rec.id}", on_click=_on_delete, args=(rec.id,))


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    ss = st.session_state

    st.title(APP_TITLE)
    st.caption(f"v{APP_VERSION}")

    if ss.countdown_done:
        st.toast("⏰ 타이머 종료!")
        st.balloons()
        ss.countdown_done = False
    if ss.flash:
        st.info(ss.flash)
        ss.flash = ""

    left, right = st.columns([1.0, 1.6], gap="large")
    with left:
        with st.container(border=True):
            render_clock()
        with st.container(border=True):
            render_records()
    with right:
        with st.container(border=True):
            form = render_form()
            render_items()
            render_results(form)


if __name__ == "__main__":
    main()
