from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379"
    redis_max_connections: int = 50
    redis_socket_timeout: int = 5

    tree_key_prefix: str = "tree"

    log_timezone: str = "Asia/Tokyo"
    max_range_days: int = 366

    default_page_size: int = 50
    max_page_size: int = 500
    page_window: int = 5

    top_queries_limit: int = 10
    device_top_queries_limit: int = 5

    activity_log_limit: int = 50

    worker_base_url: str = "http://localhost:8787"
    worker_admin_token: str = ""
    worker_timeout_seconds: float = 10.0

    config_admin_emails: list[str] = []

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
