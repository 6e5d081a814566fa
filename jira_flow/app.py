"""Application entry point: page registry, router, and settings lookup."""

from __future__ import annotations

import os
from collections.abc import Mapping

import streamlit as st
from streamlit.errors import StreamlitAPIException

PAGES = {}


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def settings_source() -> dict[str, object]:
    """Merge environment variables, top-level secrets and the ``[jira]`` secrets section.

    Later sources win, so values in ``.streamlit/secrets.toml`` override the
    environment.
    """
    merged: dict[str, object] = dict(os.environ)
    try:
        secrets = dict(st.secrets)
    except (FileNotFoundError, StreamlitAPIException):
        secrets = {}
    jira_section = secrets.pop("jira", {}) or {}
    merged.update({k: v for k, v in secrets.items() if not isinstance(v, Mapping)})
    merged.update(dict(jira_section))
    return merged


def main():
    st.sidebar.title("Jira Hierarchy Flow")
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Hierarchy Flow",  # main graph view
        "Catalog",  # projects / issue types / raw page
        "Health",  # configuration status
        "Setup / Connection",  # configuration
    ]
    ordered = [name for name in preferred_order if name in pages]
    trailing = sorted(name for name in pages if name not in preferred_order)
    pages = ordered + trailing

    # Without a service the only useful page is setup
    if "Setup / Connection" in pages and "issue_service" not in st.session_state:
        default = pages.index("Setup / Connection")
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
