import streamlit as st

from core.config import TRANSITION_SOUNDS

AUDIO_TAG = '<audio autoplay><source src="{url}" type="audio/mpeg"></audio>'


def transition_sound_html(next_mode: str) -> str:
    """Autoplaying <audio> tag for the chime of `next_mode`; unknown modes get no sound."""
    url = TRANSITION_SOUNDS.get(next_mode)
    return AUDIO_TAG.format(url=url) if url else ""

def play_transition_sound(next_mode: str):
    if not st.session_state.get("sound_on", True):
        return
    html = transition_sound_html(next_mode)
    if html:
        st.markdown(html, unsafe_allow_html=True)
