"""Connection setup page: collect Jira credentials and initialize IssueService."""

from __future__ import annotations

import streamlit as st

from jira_flow.app import register_page, settings_source
from jira_flow.core.config import SETTING_KEYS, load_settings
from jira_flow.core.errors import ConfigError
from jira_flow.core.jira_client import JiraAPI
from jira_flow.core.service import IssueService


def _prefill(name: str) -> str:
    source = settings_source()
    for key in SETTING_KEYS[name]:
        if source.get(key):
            return str(source[key])
    return ""


def connect(source) -> IssueService:
    """Validate settings and build a session-scoped IssueService."""
    settings = load_settings(source)
    api = JiraAPI(settings.base_url, settings.email, settings.api_token)
    st.session_state["jira_server"] = settings.base_url
    st.session_state["jira_email"] = settings.email
    service = IssueService(api, jql_filter=settings.jql_filter)
    st.session_state["issue_service"] = service
    return service


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    server = st.text_input(
        "Jira Base URL",
        value=st.session_state.get("jira_server") or _prefill("base_url"),
    )
    email = st.text_input(
        "Email",
        value=st.session_state.get("jira_email") or _prefill("email"),
    )
    token = st.text_input("API Token", type="password", value=_prefill("api_token"))
    jql = st.text_area(
        "Default JQL filter (optional)",
        value=_prefill("jql_filter"),
        help="Leave empty to generate a filter from discovered projects and issue types.",
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        try:
            connect(
                {
                    "JIRA_BASE_URL": server,
                    "JIRA_EMAIL": email,
                    "JIRA_API_TOKEN": token,
                    "JQL_FILTER": jql,
                }
            )
            st.success("Connection initialized.")
        except ConfigError as e:
            st.error(str(e))
        except Exception as e:  # pragma: no cover
            st.error(f"Failed to initialize Jira client: {e}")

    if "issue_service" in st.session_state:
        st.info("IssueService ready.")
