from typing import Annotated, Any, Awaitable, Callable, Dict

from fastmcp import FastMCP
from pydantic import Field

from app.tools.responses import run_tool
from swapi.resources import RESOURCES, Resource
from swapi.service import SwapiService


def make_list_tool(service: SwapiService, resource: Resource) -> Callable[..., Awaitable[str]]:
    async def list_resource(
        page: Annotated[int, Field(description="Page number (1-based) when not fetching all pages", ge=1)] = 1,
        search: Annotated[str, Field(description="Optional case-insensitive search term")] = "",
        fetch_all_pages: Annotated[
            bool, Field(description="Whether to automatically fetch all pages of results (defaults to true)")
        ] = True,
    ) -> str:
        params: Dict[str, Any] = {"page": page}
        if search:
            params["search"] = search

        async def op() -> Any:
            if fetch_all_pages:
                return await service.fetch_all_pages(resource.path, params)
            return await service.fetch_with_cache(resource.path, params)

        return await run_tool(resource.list_tool, op)

    list_resource.__name__ = resource.list_tool
    list_resource.__doc__ = resource.list_description
    return list_resource


def make_detail_tool(service: SwapiService, resource: Resource) -> Callable[..., Awaitable[str]]:
    async def get_resource(
        id: Annotated[int | str, Field(description=f"Numeric ID of the {resource.noun_singular}")],
    ) -> str:
        async def op() -> Any:
            return await service.fetch_with_cache(resource.detail_path(id))

        return await run_tool(resource.detail_tool, op)

    get_resource.__name__ = resource.detail_tool
    get_resource.__doc__ = resource.detail_description
    return get_resource


def register_catalog_tools(mcp: FastMCP, service: SwapiService):
    for resource in RESOURCES:
        mcp.tool(name=resource.list_tool, description=resource.list_description)(make_list_tool(service, resource))
        mcp.tool(name=resource.detail_tool, description=resource.detail_description)(
            make_detail_tool(service, resource)
        )
