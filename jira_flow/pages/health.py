"""Health page: configuration and connection status."""

from __future__ import annotations

import time
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version

import pytz
import streamlit as st

from jira_flow.app import register_page, settings_source
from jira_flow.core.config import load_settings
from jira_flow.core.errors import ConfigError

_STARTED = time.monotonic()


def health_report(source) -> dict:
    try:
        app_version = version("jira-hierarchy-flow")
    except PackageNotFoundError:
        app_version = "unknown"
    report = {
        "status": "healthy",
        "timestamp": datetime.now(pytz.UTC).isoformat(),
        "version": app_version,
        "uptime_seconds": round(time.monotonic() - _STARTED, 1),
    }
    try:
        settings = load_settings(source)
    except ConfigError as exc:
        report["status"] = "unhealthy"
        report["jira"] = {"configured": False, "error": str(exc)}
        return report
    report["jira"] = {
        "base_url": settings.base_url,
        "configured": True,
        "jql_filter": settings.jql_filter or None,
    }
    return report


@register_page("Health")
def health_page():
    st.title("Health")
    report = health_report(settings_source())
    if report["status"] == "healthy":
        st.success("Configuration valid.")
    else:
        st.error(f"Configuration error: {report['jira']['error']}")
    st.write("IssueService connected:", "issue_service" in st.session_state)
    st.json(report)
