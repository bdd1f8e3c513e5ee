import os

from dotenv import load_dotenv

load_dotenv()

class Settings:
    PROJECT_NAME: str = "SWAPI-MCP"
    VERSION: str = "1.0.0"

    # Upstream
    SWAPI_BASE_URL: str = os.getenv("SWAPI_BASE_URL", "https://swapi.dev/api").strip().rstrip("/")
    HTTP_TIMEOUT_SEC: float = float(os.getenv("SWAPI_HTTP_TIMEOUT_SEC", "10"))

    # Cache
    CACHE_TTL_SEC: float = float(os.getenv("SWAPI_CACHE_TTL_SEC", "1800"))  # 30 minutes
    CACHE_CHECK_PERIOD_SEC: float = float(os.getenv("SWAPI_CACHE_CHECK_PERIOD_SEC", "600"))
    CACHE_MAX_KEYS: int = int(os.getenv("SWAPI_CACHE_MAX_KEYS", "500"))
    ALL_PAGES_TTL_SEC: float = float(os.getenv("SWAPI_ALL_PAGES_TTL_SEC", "3600"))

    # Rate limiting (429) retry
    RETRY_MAX: int = int(os.getenv("SWAPI_RETRY_MAX", "3"))
    RETRY_DELAY_MS: int = int(os.getenv("SWAPI_RETRY_DELAY_MS", "2000"))

    # Pagination fan-out; 0 means every remaining page is fetched at once
    PAGE_CONCURRENCY: int = int(os.getenv("SWAPI_PAGE_CONCURRENCY", "0"))

settings = Settings()
