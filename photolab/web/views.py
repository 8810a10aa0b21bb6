"""Streamlit views: input, studio config, loading overlay and showcase."""

import asyncio
import hashlib
import logging
import time
from collections.abc import Awaitable, Callable

import streamlit as st
from st_copy_to_clipboard import st_copy_to_clipboard

from photolab.config import AppConfig
from photolab.errors import InputValidationError, ResumeError
from photolab.models import STYLE_PRESETS, ProductImage
from photolab.services.orchestrator import GenerationOrchestrator, ProgressCallback
from photolab.utils.device import DeviceInfo
from photolab.utils.file_handler import load_source_image, parse_data_uri
from photolab.session import StudioSession
from photolab.web.session import get_session

logger = logging.getLogger(__name__)

UPLOAD_TYPES = ["jpg", "jpeg", "png", "webp", "gif"]

STYLE_INPUT_KEY = "style_prompt_input"
STYLE_PRESET_KEY = "style_preset"
WIDGET_NONCE_KEY = "capture_widget_nonce"

LOADING_STEPS: tuple[tuple[str, int], ...] = (
    ("Analysis", 0),
    ("Lighting", 30),
    ("Rendering", 60),
    ("Polishing", 90),
)

LOADING_TIP = "Tip: Use high-contrast backgrounds for better edge detection."


def loading_steps(progress: int) -> list[tuple[str, bool]]:
    """Stepper stages with whether each one is reached at ``progress``."""
    return [(label, progress >= threshold) for label, threshold in LOADING_STEPS]


class LoadingOverlay:
    """Progress panel redrawn in place while a sequence runs."""

    def __init__(self, slot):
        self.slot = slot

    def update(self, session: StudioSession) -> None:
        if not session.is_loading:
            return
        with self.slot.container(border=True):
            st.markdown("#### Studio Engine Active")
            st.progress(session.progress, text=f"{session.progress}% · {session.current_task}")
            for column, (label, reached) in zip(
                st.columns(len(LOADING_STEPS)), loading_steps(session.progress)
            ):
                column.markdown(f"**{label}**" if reached else f":gray[{label}]")
            st.caption(f"💡 {LOADING_TIP}")

    def clear(self) -> None:
        self.slot.empty()


# --- Callbacks ---


def _widget_key(name: str) -> str:
    return f"{name}_{st.session_state.get(WIDGET_NONCE_KEY, 0)}"


def _on_capture(widget_key: str, max_bytes: int) -> None:
    """Load a new upload or camera capture into the session."""
    session = get_session()
    file = st.session_state.get(widget_key)
    if file is None:
        return

    data = file.getvalue()
    token = getattr(file, "file_id", None) or hashlib.sha1(data).hexdigest()
    if token == session.upload_token:
        return

    try:
        uri = load_source_image(data, getattr(file, "type", None), max_bytes)
    except InputValidationError as e:
        logger.info(f"[SESSION {session.id}] Upload rejected: {e}")
        session.reject_upload(e.message, token)
        return
    session.set_source_image(uri, token)


def _on_style_change() -> None:
    get_session().style_prompt = st.session_state.get(STYLE_INPUT_KEY, "")


def _on_preset_change() -> None:
    preset = st.session_state.get(STYLE_PRESET_KEY)
    if preset is None:
        return
    style = STYLE_PRESETS.get(preset, "")
    st.session_state[STYLE_INPUT_KEY] = style
    get_session().style_prompt = style


def reset_studio() -> None:
    """Clear the session and every input widget."""
    get_session().reset()
    st.session_state[STYLE_INPUT_KEY] = ""
    st.session_state[STYLE_PRESET_KEY] = None
    # New keys give fresh, empty uploader/camera widgets
    st.session_state[WIDGET_NONCE_KEY] = st.session_state.get(WIDGET_NONCE_KEY, 0) + 1


# --- Panels ---


def render_header(config: AppConfig) -> None:
    left, right = st.columns([4, 1])
    with left:
        st.title("📸 Marketplace Pro")
        st.caption("AI PHOTO LAB")
    with right:
        st.caption(f"`{config.gemini.model}`")


def render_input_panel(session: StudioSession, config: AppConfig, device: DeviceInfo) -> None:
    """Upload/camera tabs and the source preview."""
    max_bytes = config.generation.max_upload_bytes
    with st.container(border=True):
        st.subheader("Input Asset")

        upload_key = _widget_key("upload")
        camera_key = _widget_key("camera")
        labels = ["📁 Upload", "📸 Take a Photo"]
        if device.is_mobile:
            labels.reverse()
        tabs = dict(zip(labels, st.tabs(labels)))

        with tabs["📁 Upload"]:
            st.file_uploader(
                f"Upload product (max {config.generation.max_upload_mb}MB)",
                type=UPLOAD_TYPES,
                key=upload_key,
                on_change=_on_capture,
                args=(upload_key, max_bytes),
            )
        with tabs["📸 Take a Photo"]:
            st.camera_input(
                "Point your camera at the product and take a photo.",
                key=camera_key,
                on_change=_on_capture,
                args=(camera_key, max_bytes),
            )

        if session.source_image:
            image_bytes, _ = parse_data_uri(session.source_image)
            st.image(image_bytes, caption="Input", use_container_width=True)
        else:
            st.info("Upload or photograph a product to begin.")


def _execute(
    action: Callable[[StudioSession, ProgressCallback | None], Awaitable[list[ProductImage]]],
    session: StudioSession,
    overlay: LoadingOverlay,
) -> None:
    """Run a generation coroutine to completion inside this script run."""
    try:
        asyncio.run(action(session, overlay.update))
    except ResumeError as e:
        logger.info(f"[SESSION {session.id}] Resume refused: {e}")
        session.error = e.message
    finally:
        if session.is_loading:
            # A widget interaction rerun the script before the sequence finished
            logger.warning(f"[SESSION {session.id}] Generation interrupted by rerun")
            session.fail("Generation was interrupted. Run the session again.")
        overlay.clear()


@st.fragment(run_every=1)
def _cooldown_countdown(session: StudioSession) -> None:
    remaining = session.cooldown_remaining(time.monotonic())
    if remaining <= 0:
        st.rerun()
    st.button(
        f"⏳ Resume in {int(remaining) + 1}s",
        disabled=True,
        use_container_width=True,
        key="resume_countdown",
    )


def render_config_panel(
    session: StudioSession, orchestrator: GenerationOrchestrator, overlay: LoadingOverlay
) -> None:
    """Style prompt, error box and the run/resume buttons."""
    with st.container(border=True):
        st.subheader("Studio Config")

        st.selectbox(
            "Style preset",
            options=list(STYLE_PRESETS),
            index=None,
            placeholder="Choose a preset backdrop...",
            key=STYLE_PRESET_KEY,
            on_change=_on_preset_change,
        )
        st.session_state.setdefault(STYLE_INPUT_KEY, session.style_prompt)
        st.text_area(
            "Atmosphere prompt",
            placeholder="e.g. 'minimalist concrete loft', 'soft sun'...",
            key=STYLE_INPUT_KEY,
            on_change=_on_style_change,
        )

        if session.error:
            st.error(session.error, icon="⚠️")

        run_clicked = st.button(
            "Processing..." if session.is_loading else "Run Session",
            type="primary",
            disabled=not session.can_generate,
            use_container_width=True,
        )
        if run_clicked:
            _execute(orchestrator.run, session, overlay)
            st.rerun()

        if session.rate_limited:
            if session.can_resume(time.monotonic()):
                if st.button("▶️ Resume Session", use_container_width=True):
                    _execute(orchestrator.resume, session, overlay)
                    st.rerun()
            else:
                _cooldown_countdown(session)


def _copy_description(image: ProductImage) -> None:
    try:
        st_copy_to_clipboard(
            image.description,
            before_copy_label="📋 Copy description",
            after_copy_label="✅ Copied",
            key=f"copy_{image.id}",
        )
    except Exception as e:
        # Clipboard is best-effort; the image itself is still downloadable
        logger.warning(f"Clipboard copy unavailable for {image.angle}: {e}")


def render_showcase(session: StudioSession) -> None:
    """Generated results, newest sequence only."""
    title, action = st.columns([4, 1])
    title.header("Showcase")
    if session.results:
        action.button("Reset", on_click=reset_studio)

    if not session.results:
        with st.container(border=True):
            st.markdown("### 📷\nStudio waiting for input")
        return

    for image in session.results:
        image_bytes, mime_type = parse_data_uri(image.url)
        extension = mime_type.split("/")[-1]
        with st.container(border=True):
            st.markdown(f"**{image.angle.upper()}**")
            st.image(image_bytes, caption=image.description, use_container_width=True)
            download, copy = st.columns(2)
            with download:
                st.download_button(
                    "⬇️ Download",
                    data=image_bytes,
                    file_name=f"product_{image.id}_{image.angle.lower().replace(' ', '_')}.{extension}",
                    mime=mime_type,
                    key=f"download_{image.id}",
                    use_container_width=True,
                )
            with copy:
                _copy_description(image)


def render_app(config: AppConfig, orchestrator: GenerationOrchestrator, device: DeviceInfo) -> None:
    """Compose the whole page."""
    session = get_session()

    render_header(config)
    overlay = LoadingOverlay(st.empty())

    if device.is_mobile:
        render_input_panel(session, config, device)
        render_config_panel(session, orchestrator, overlay)
        render_showcase(session)
        return

    inputs, results = st.columns([5, 7], gap="large")
    with inputs:
        render_input_panel(session, config, device)
        render_config_panel(session, orchestrator, overlay)
    with results:
        render_showcase(session)
