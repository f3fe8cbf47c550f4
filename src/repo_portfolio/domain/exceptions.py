"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class PortfolioError(Exception):
    """Base exception for the entire application."""


# ── Configuration ───────────────────────────────────────────────────────────


class ConfigurationError(PortfolioError):
    """A required setting (access token, default account) is missing."""


# ── Repository host errors ──────────────────────────────────────────────────


class HostError(PortfolioError):
    """Any failure reported by, or while talking to, the repository host."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class HostNotFoundError(HostError):
    """The user or repository does not exist on the host (404)."""


class HostAccessDeniedError(HostError):
    """The host refused access to the resource (403)."""


class HostAuthenticationError(HostError):
    """The access token was rejected by the host (401)."""


class HostRateLimitError(HostError):
    """Host API rate limit exceeded (429 / 403 with rate-limit header)."""


class HostQueryError(HostError):
    """The host rejected the search query as malformed (422)."""


class HostTransportError(HostError):
    """Network-level failure before the host produced a response."""
