# app.py
import streamlit as st

from core.config import APP_TITLE, PAGE_ICON, load_settings
from core.constants import XP_PER_LEVEL
from core.log import configure_logging
from core.time_utils import get_tz
from ui.runtime import call_or_stop
from ui.tabs.focus_tab import render_focus_tab
from ui.tabs.stats_tab import render_stats_tab
from ui.tabs.today_tab import render_today_tab

st.set_page_config(page_title=APP_TITLE, page_icon=PAGE_ICON, layout="wide")

try:
    settings = load_settings(st.secrets if st.secrets.load_if_toml_exists() else None)
except ValueError as e:
    st.error(f"Invalid configuration: {e}")
    st.stop()
configure_logging(settings.log_level)
if not settings.mongo_uri:
    st.error("MONGO_URI is not configured.")
    st.stop()

tz = get_tz(settings.timezone)
owner = settings.user_id
profile = call_or_stop(settings, tz, lambda s: s.profiles.get_or_create_profile(owner, settings.user_email),
                       "Loading profile failed")

# Sidebar
st.sidebar.header(f"{PAGE_ICON} {profile.nickname}")
st.sidebar.write(f"**Level {profile.level}** · {profile.rank}")
st.sidebar.progress(min(profile.xp / XP_PER_LEVEL, 1.0), text=f"{profile.xp} / {XP_PER_LEVEL} XP")

with st.sidebar.expander("⚙️ Profile"):
    with st.form("profile_form"):
        nickname = st.text_input("Nickname", value=profile.nickname, max_chars=40)
        dark_mode = st.toggle("Dark mode", value=profile.dark_mode)
        saved = st.form_submit_button("Save", use_container_width=True)
    if saved:
        try:
            call_or_stop(settings, tz, lambda s: s.profiles.update_profile(
                owner, {"nickname": nickname, "dark_mode": dark_mode}
            ), "Saving profile failed")
        except ValueError as e:
            st.warning(str(e))
        else:
            st.rerun()

st.sidebar.caption(f"DB: `{settings.db_name}` · TZ: `{settings.timezone}`")

if not profile.dark_mode:
    st.markdown("<style>.stApp {background-color: #fafafa; color: #111;}</style>", unsafe_allow_html=True)

tab1, tab2, tab3 = st.tabs(["✅ Today", "⏱️ Focus", "📊 Statistics"])

with tab1:
    render_today_tab(settings, tz, owner)

with tab2:
    render_focus_tab(settings, tz, owner)

with tab3:
    render_stats_tab(settings, tz, owner)
