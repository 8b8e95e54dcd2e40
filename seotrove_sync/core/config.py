"""Application configuration."""

from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "seotrove-sync"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Content API
    CONTENT_API_BASE_URL: str = "https://api.seotrove.com/api/v1/sdk"
    FETCHER_TIMEOUT_SEC: float = 30.0
    FETCHER_USER_AGENT: str = "seotrove-sync/0.1 (+https://seotrove.com)"

    # Sync Settings
    SYNC_INTERVAL_SEC: int = 60 * 60 * 24  # 24 hours
    # 合并抓取整体抛错时退回只抓新内容；单边失败已在 fetch_all 内按空结果处理，不受此开关影响
    FIRST_SYNC_FALLBACK_ENABLED: bool = True
    SYNC_SKIP_IF_IN_FLIGHT: bool = True  # 同一源已有同步在跑时跳过

    @computed_field
    @property
    def content_api_base_url(self) -> str:
        """Base URL without trailing slash."""
        return self.CONTENT_API_BASE_URL.rstrip("/")


settings = Settings()
