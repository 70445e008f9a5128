# ui/tabs/focus_tab.py
import time
from datetime import timedelta

import streamlit as st

from core.config import BREAK_MIN, POMODORO_MIN
from core.constants import MODE_BREAK, MODE_WORK, XP_PER_FOCUS_SESSION
from core.time_utils import now_in
from ui.components.sound import play_transition_sound
from ui.runtime import call_or_stop

def render_focus_tab(settings, tz, owner: str):
    st.header("⏱️ Focus")
    st.toggle("🔊 Sound", value=st.session_state.get("sound_on", True), key="sound_on",
              help="Play a sound when the timer completes.")

    today = call_or_stop(settings, tz, lambda s: s.focus.get_today_focus_stats(owner, now_in(tz)),
                         "Loading focus stats failed")
    c1, c2, c3 = st.columns(3)
    with c1: st.metric("Sessions today", today.completed_count)
    with c2: st.metric("Minutes today", today.total_minutes)
    with c3: st.metric("XP earned", f"+{today.completed_count * XP_PER_FOCUS_SESSION}")

    st.divider()
    if "timer" not in st.session_state:
        st.session_state.timer = {
            "running": False, "end_ts": None, "started_at": None,
            "mode": MODE_WORK, "work_min": POMODORO_MIN, "break_min": BREAK_MIN,
        }
    timer = st.session_state.timer

    if not timer["running"]:
        w, b = st.columns(2)
        timer["work_min"] = w.number_input("Work (min)", min_value=1, max_value=180, value=timer["work_min"])
        timer["break_min"] = b.number_input("Break (min)", min_value=1, max_value=60, value=timer["break_min"])
        label = "▶️ Start focus" if timer["mode"] == MODE_WORK else "▶️ Start break"
        if st.button(label, use_container_width=True):
            _start_timer(timer, tz)
    else:
        _render_countdown(timer, settings, tz, owner)

    chime = st.session_state.pop("chime_for", None)
    if chime:
        play_transition_sound(chime)

def _minutes_for(timer) -> int:
    return int(timer["work_min"] if timer["mode"] == MODE_WORK else timer["break_min"])

def _start_timer(timer, tz):
    started = now_in(tz)
    timer.update({"running": True, "started_at": started,
                  "end_ts": started + timedelta(minutes=_minutes_for(timer))})
    st.rerun()

def _render_countdown(timer, settings, tz, owner: str):
    total_secs = max(_minutes_for(timer) * 60, 1)
    remaining_secs = max(int((timer["end_ts"] - now_in(tz)).total_seconds()), 0)
    elapsed_secs = total_secs - remaining_secs
    rem_m, rem_s = divmod(remaining_secs, 60)

    mode_lbl = "Work" if timer["mode"] == MODE_WORK else "Break"
    st.markdown(f"### ⏳ {mode_lbl}: {rem_m:02d}:{rem_s:02d}")
    st.progress(min(max(elapsed_secs / total_secs, 0.0), 1.0))

    stop_col, done_col = st.columns(2)
    if stop_col.button("⏹️ Stop / Cancel", use_container_width=True, key="btn_stop_live"):
        timer["running"] = False
        st.rerun()
    if done_col.button("✅ Complete now", use_container_width=True, key="btn_complete_live"):
        remaining_secs = 0

    if remaining_secs <= 0:
        minutes = _minutes_for(timer)
        mode = timer["mode"]
        call_or_stop(settings, tz, lambda s: s.focus.record_focus_session(owner, minutes, mode, now_in(tz)),
                     "Recording focus session failed")
        next_mode = MODE_BREAK if mode == MODE_WORK else MODE_WORK
        st.session_state["chime_for"] = next_mode
        timer.update({"running": False, "mode": next_mode})
        st.toast(f"{mode_lbl} session saved.", icon="✅")
        st.rerun()

    time.sleep(1)
    st.rerun()
