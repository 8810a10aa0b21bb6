"""Error boundary for page rendering."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import streamlit as st

from photolab.web.views import reset_studio

logger = logging.getLogger(__name__)


def render_fallback(error: Exception) -> None:
    """Render the fallback panel shown after an unexpected rendering error."""
    with st.container(border=True):
        st.markdown("### ⚠️ Interface Error")
        st.write("The application encountered an unexpected rendering issue.")
        st.caption(f"{type(error).__name__}: {error}")
        st.button("Reload Application", type="primary", on_click=reset_studio)


@contextmanager
def error_boundary() -> Iterator[None]:
    """Catch rendering errors, log them and show the fallback panel.

    st.rerun()/st.stop() signal through BaseException subclasses and pass through.
    """
    try:
        yield
    except Exception as e:
        logger.error(f"Uncaught error while rendering: {e}", exc_info=True)
        render_fallback(e)
