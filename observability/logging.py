from __future__ import annotations

import contextvars
import json
import os
import sys
import time
import uuid
from typing import Any, Dict, Optional

_CURRENT_CTX: contextvars.ContextVar[Optional[Dict[str, Any]]] = contextvars.ContextVar(
    "swapi_mcp_log_ctx",
    default=None,
)


def get_current_context() -> Optional[Dict[str, Any]]:
    return _CURRENT_CTX.get()


def set_current_context(ctx: Optional[Dict[str, Any]]) -> contextvars.Token:
    return _CURRENT_CTX.set(ctx)


def reset_current_context(token: contextvars.Token) -> None:
    _CURRENT_CTX.reset(token)


_LEVELS = {"debug": 10, "info": 20, "warn": 30, "warning": 30, "error": 40}


def _level_value(level: str) -> int:
    return _LEVELS.get(str(level or "").strip().lower(), 20)


def _min_level_value() -> int:
    # Prefer explicit SWAPI_MCP_LOG_LEVEL, fallback to LOG_LEVEL.
    raw = (os.getenv("SWAPI_MCP_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "info").strip().lower()
    return _level_value(raw)


_SENSITIVE_KEYWORDS = ("secret", "password", "token", "authorization", "cookie", "api_key", "apikey")


def redact(value: Any) -> Any:
    """
    Best-effort redaction for logs. Upstream query params are logged as-is otherwise.
    """
    if isinstance(value, dict):
        out: Dict[str, Any] = {}
        for k, v in value.items():
            ks = str(k).lower()
            if any(x in ks for x in _SENSITIVE_KEYWORDS):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, (list, tuple)):
        return [redact(x) for x in value]
    return value


def build_log_context(*, tool: str, request_id: str | None = None) -> Dict[str, Any]:
    """
    Build a per-invocation context object for structured logs.
    """
    return {
        "tool": tool,
        "request_id": str(request_id or uuid.uuid4()),
        "ts_ms": int(time.time() * 1000),
        "service": os.getenv("SWAPI_MCP_SERVICE_NAME", "swapi-mcp"),
    }


def log_event(event: str, *, ctx: Dict[str, Any], data: Optional[Dict[str, Any]] = None, level: str = "info") -> None:
    """
    Emit a single-line JSON log event to stderr.

    stdout belongs to the MCP stdio transport, so nothing here may print there.
    """
    if _level_value(level) < _min_level_value():
        return
    payload = dict(ctx)
    payload["level"] = str(level).upper()
    payload["event"] = event
    if data:
        payload["data"] = redact(data)
    print(json.dumps(payload, sort_keys=True, default=str), file=sys.stderr)
