"""Entry point for running the studio as a module."""

import sys
from pathlib import Path

from streamlit.web import cli as stcli


def main() -> None:
    """Launch ``streamlit run`` on the studio app, forwarding extra CLI args."""
    app_path = Path(__file__).with_name("app.py")
    sys.argv = ["streamlit", "run", str(app_path), *sys.argv[1:]]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
