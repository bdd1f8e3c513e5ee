from .logging import (
    build_log_context,
    get_current_context,
    log_event,
    reset_current_context,
    set_current_context,
)

__all__ = [
    "build_log_context",
    "get_current_context",
    "log_event",
    "reset_current_context",
    "set_current_context",
]
