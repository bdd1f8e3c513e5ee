from fastmcp import FastMCP

from app.core.config import settings
from app.core.container import global_container
from app.tools.cache_admin import register_cache_tools
from app.tools.catalog import register_catalog_tools

INSTRUCTIONS = (
    "Read-only access to the Star Wars API (films, characters, planets, species, vehicles, starships). "
    "List tools fetch and merge every page by default; pass fetch_all_pages=false for a single page. "
    "Responses are cached in memory; use clear_cache to force fresh data and get_cache_stats to inspect hit rates."
)

# Initialize FastMCP server
mcp = FastMCP(settings.PROJECT_NAME, instructions=INSTRUCTIONS)

# Register Tools
register_catalog_tools(mcp, global_container.swapi)
register_cache_tools(mcp, global_container.swapi)


def main() -> None:
    global_container.start()
    try:
        mcp.run()
    finally:
        global_container.stop()


if __name__ == "__main__":
    main()
