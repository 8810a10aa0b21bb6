"""Per-browser-session storage of the studio state."""

import streamlit as st

from photolab.session import StudioSession

SESSION_KEY = "studio_session"


def get_session() -> StudioSession:
    """Get the studio session of the current browser session."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = StudioSession()
    return st.session_state[SESSION_KEY]
