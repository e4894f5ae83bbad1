from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ImxEnvironment = Literal["sandbox", "production"]

API_BASE_URLS: dict[str, str] = {
    "sandbox": "https://api.sandbox.x.immutable.com",
    "production": "https://api.x.immutable.com",
}


class AppSettings(BaseSettings):
    """SDK 與 CLI 的環境設定。"""

    imx_env: ImxEnvironment = Field("sandbox", alias="IMX_ENV")
    imx_api_base_url: Optional[str] = Field(None, alias="IMX_API_BASE_URL")
    imx_http_timeout: float = Field(30.0, gt=0, alias="IMX_HTTP_TIMEOUT")

    eth_private_key: Optional[SecretStr] = Field(None, alias="ETH_PRIVATE_KEY")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=(".env",), env_file_encoding="utf-8", extra="ignore")

    @property
    def api_base_url(self) -> str:
        """依環境取得 API 根網址，`IMX_API_BASE_URL` 優先。"""

        if self.imx_api_base_url:
            return self.imx_api_base_url.rstrip("/")
        return API_BASE_URLS[self.imx_env]

    @field_validator("imx_env", mode="before")
    @classmethod
    def _normalize_env(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("imx_api_base_url", "eth_private_key", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Optional[str]) -> Optional[str]:
        if value in ("", "null", "None"):
            return None
        return value


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """載入並快取設定。"""

    return AppSettings()
