"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``jira_flow/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
import os
from importlib import import_module
from pathlib import Path

import streamlit as st

from jira_flow.app import main, settings_source
from jira_flow.core.errors import ConfigError

st.set_page_config(layout="wide")
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

PAGES_DIR = Path(__file__).parent / "jira_flow" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"jira_flow.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        logging.getLogger(__name__).error("Failed importing page %s: %s", mod_name, e)


def _auto_init_issue_service():
    """Initialize the Jira service from environment / Streamlit secrets if available."""
    if "issue_service" in st.session_state:
        return
    from jira_flow.pages.setup import connect

    try:
        connect(settings_source())
        st.sidebar.success("Jira connection successful!")
    except ConfigError as e:
        st.sidebar.warning(f"Jira settings incomplete ({e}). Please use the Setup page.")
    except Exception as e:
        st.sidebar.error(f"Jira connection failed: {e}")
        st.session_state.pop("issue_service", None)


_auto_init_issue_service()

if __name__ == "__main__":
    main()
