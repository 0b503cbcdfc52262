"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = "sqlite:///./journal.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Remote trade endpoint (spreadsheet web app). Empty = offline only.
    remote_endpoint: str = ""
    # Tried in order before the direct call, e.g. "https://corsproxy.io/?{url}"
    proxy_templates: list[str] = []
    read_timeout: float = 10.0
    write_timeout: float = 15.0

    # Refresh after a remote write, and optional periodic refresh
    refresh_delay_seconds: float = 2.0
    auto_refresh_minutes: int = 0  # 0 disables

    # Journal
    default_fee_rate: float = 0.004026
    timezone: str = "Asia/Jakarta"
    fallback_key: str = "trades"

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
