"""Main Streamlit app file."""

import logging

import streamlit as st
from dotenv import find_dotenv, load_dotenv

from photolab.config import AppConfig, get_config
from photolab.errors import CredentialsError
from photolab.services.gemini_client import get_gemini_client
from photolab.services.orchestrator import GenerationOrchestrator
from photolab.utils.device import detect_device
from photolab.web.boundary import error_boundary
from photolab.web.views import render_app

# Load environment variables from the launch directory
load_dotenv(find_dotenv(usecwd=True))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s · %(levelname)s · %(name)s · %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def configure_logging(config: AppConfig) -> None:
    """Set logging level from config."""
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)
    logging.getLogger().setLevel(log_level)


def render_missing_credentials(error: CredentialsError) -> None:
    st.error(f"⚙️ Configuration error: {error.message}", icon="🔑")
    st.markdown(
        "Create a `.env` file next to where you start the app:\n\n"
        "```\nGEMINI_API_KEY=your-key-here\n```\n\n"
        "then restart the studio."
    )


def main() -> None:
    """Main entry point."""
    st.set_page_config(page_title="Marketplace Pro · AI Photo Lab", page_icon="📸", layout="wide")

    config = get_config()
    configure_logging(config)

    try:
        client = get_gemini_client()
    except CredentialsError as e:
        logger.error(f"Studio not started: {e}")
        render_missing_credentials(e)
        st.stop()

    orchestrator = GenerationOrchestrator(client, config.generation)
    device = detect_device(st.context.headers.get("User-Agent"))

    with error_boundary():
        render_app(config, orchestrator, device)


if __name__ == "__main__":
    main()
