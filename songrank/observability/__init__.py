"""Observability module for logging."""

from songrank.observability.logging import (
    bind_session_context,
    clear_session_context,
    configure_logging,
    session_context,
)


__all__ = [
    "bind_session_context",
    "clear_session_context",
    "configure_logging",
    "session_context",
]
