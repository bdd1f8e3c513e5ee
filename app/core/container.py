from app.core.config import Settings, settings
from common.api_cache import RetryOptions
from swapi.service import SwapiService


def build_swapi_service(cfg: Settings) -> SwapiService:
    return SwapiService(
        base_url=cfg.SWAPI_BASE_URL,
        default_ttl=cfg.CACHE_TTL_SEC,
        check_period=cfg.CACHE_CHECK_PERIOD_SEC,
        max_keys=cfg.CACHE_MAX_KEYS,
        aggregate_ttl=cfg.ALL_PAGES_TTL_SEC,
        retry=RetryOptions(max_retries=cfg.RETRY_MAX, delay_ms=cfg.RETRY_DELAY_MS),
        timeout_sec=cfg.HTTP_TIMEOUT_SEC,
        page_concurrency=cfg.PAGE_CONCURRENCY,
    )


class Container:
    def __init__(self, cfg: Settings = settings):
        self.settings = cfg
        self.swapi = build_swapi_service(cfg)

    def start(self) -> None:
        self.swapi.start()

    def stop(self) -> None:
        self.swapi.stop()

global_container = Container()
