from typing import Annotated, Any, Awaitable, Callable, Tuple

from fastmcp import FastMCP
from pydantic import Field

from app.tools.responses import run_tool
from swapi.service import SwapiService


def make_cache_tools(service: SwapiService) -> Tuple[Callable[..., Awaitable[str]], Callable[..., Awaitable[str]]]:
    async def clear_cache(
        endpoint: Annotated[
            str, Field(description="Optional specific endpoint to clear from cache. Leave empty to clear all.")
        ] = "",
    ) -> str:
        """Clear the Star Wars API cache (partially or completely)."""

        async def op() -> Any:
            removed = service.clear_cache(endpoint or None)
            if endpoint:
                return {"message": f"Cache cleared for endpoint: {endpoint}", "removed": removed}
            return {"message": "Complete cache cleared successfully", "removed": removed}

        return await run_tool("clear_cache", op)

    async def get_cache_stats() -> str:
        """Get statistics about the Star Wars API cache usage."""

        async def op() -> Any:
            return service.get_cache_stats()

        return await run_tool("get_cache_stats", op)

    return clear_cache, get_cache_stats


def register_cache_tools(mcp: FastMCP, service: SwapiService):
    clear_cache, get_cache_stats = make_cache_tools(service)
    mcp.tool(name="clear_cache")(clear_cache)
    mcp.tool(name="get_cache_stats")(get_cache_stats)
