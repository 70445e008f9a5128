# ui/tabs/today_tab.py
import streamlit as st

from core.constants import CATEGORIES, WEEKDAY_LABELS
from core.time_utils import local_today, now_in
from ui.runtime import call_or_stop

def render_today_tab(settings, tz, owner: str):
    st.header("✅ Today")
    now = now_in(tz)
    st.caption(f"Local date: **{local_today(now, tz).isoformat()}** ({settings.timezone})")

    tasks = call_or_stop(settings, tz, lambda s: s.tasks.list_tasks(owner), "Loading habits failed")
    if not tasks:
        st.info("No habits yet. Create one below.")

    for task in tasks:
        c1, c2, c3 = st.columns([0.1, 0.75, 0.15])
        with c1:
            done = st.checkbox("done", value=task.completed, key=f"chk_{task.id}", label_visibility="collapsed")
        with c2:
            st.markdown(f"**{task.title}** · {task.category} · {task.time}")
        with c3:
            remove = st.button("🗑️", key=f"del_{task.id}", help="Delete habit and its history")
        if done != task.completed:
            call_or_stop(settings, tz, lambda s, t=task, d=done: s.tasks.toggle_task(owner, t.id, d, now_in(tz)),
                         "Updating habit failed")
            st.rerun()
        if remove:
            call_or_stop(settings, tz, lambda s, t=task: s.tasks.delete_task(owner, t.id), "Deleting habit failed")
            st.rerun()

    st.divider()
    st.subheader("➕ New Habit")
    with st.form("new_habit", clear_on_submit=True):
        title = st.text_input("Title")
        category = st.selectbox("Category", CATEGORIES)
        frequency = st.radio("Frequency", ["daily", "weekly", "custom"], horizontal=True)
        days = st.multiselect("Days", list(range(7)), default=[0, 1, 2, 3, 4],
                              format_func=lambda d: WEEKDAY_LABELS[d])
        reminder_on = st.toggle("Reminder", value=True)
        reminder_at = st.time_input("Reminder time").strftime("%H:%M")
        submitted = st.form_submit_button("Create", use_container_width=True)

    if submitted:
        try:
            call_or_stop(settings, tz, lambda s: s.tasks.add_task(
                owner, title, category=category, frequency=frequency, selected_days=days,
                reminder_enabled=reminder_on, reminder_time=reminder_at,
            ), "Creating habit failed")
        except ValueError as e:
            st.warning(str(e))
        else:
            st.rerun()
