"""Exception types raised by the fetch and query-generation layers."""

from __future__ import annotations


class JiraFlowError(RuntimeError):
    """Base class for errors raised while talking to Jira."""


class UpstreamError(JiraFlowError):
    """Search request failed; fatal to the current load, never retried here."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DiscoveryError(JiraFlowError):
    """Listing projects or issue types failed."""


class ConfigError(ValueError):
    """Connection settings are missing or invalid."""
