import json
from typing import Any, Awaitable, Callable, Dict

from common.errors import classify_exception
from observability import build_log_context, log_event, reset_current_context, set_current_context


def json_ok(data: Any = None) -> str:
    payload = {"ok": True, "data": data if data is not None else {}}
    return json.dumps(payload, indent=2, sort_keys=True)


def json_err(code: str, message: str, data: Dict[str, Any] | None = None) -> str:
    payload = {"ok": False, "error": {"code": code, "message": message, "data": data or {}}}
    return json.dumps(payload, indent=2, sort_keys=True)


async def run_tool(tool: str, op: Callable[[], Awaitable[Any]]) -> str:
    """
    Run one tool invocation under its own log context and wrap the outcome in the
    JSON envelope. Failures become error payloads; nothing escapes to the transport.
    """
    ctx = build_log_context(tool=tool)
    token = set_current_context(ctx)
    try:
        result = await op()
    except Exception as e:
        err = classify_exception(e)
        log_event("tool_failed", ctx=ctx, data={"code": err.code, "message": err.message}, level="error")
        return json_err(err.code, err.message, err.data)
    finally:
        reset_current_context(token)
    log_event("tool_completed", ctx=ctx)
    return json_ok(result)
