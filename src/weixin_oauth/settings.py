"""Application settings using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from weixin_oauth.models import Device, ProviderConfig


class ApiSettings(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="API__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    reload: bool = Field(default=False, description="Auto-reload on code changes")


class WeixinSettings(BaseSettings):
    """Weixin OAuth configuration.

    Environment variables use the WEIXIN_ prefix, e.g. WEIXIN_CLIENT_ID,
    WEIXIN_CLIENT_SECRET, WEIXIN_REDIRECT, WEIXIN_SCOPES='["snsapi_login"]'.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WEIXIN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    client_id: str = Field(default="", description="Weixin appid")
    client_secret: str = Field(default="", description="Weixin app secret")
    redirect: str = Field(default="", description="OAuth callback URL")
    proxy_url: str | None = Field(default=None, description="Authorization proxy URL")
    device: Device = Field(default=Device.PC, description="pc | mobile")
    state_cookie_name: str = Field(default="wx_state_cookie", description="State cookie name")
    state_cookie_time: int = Field(default=300, gt=0, description="State cookie lifetime in seconds")
    scopes: list[str] = Field(default_factory=lambda: ["snsapi_login"], description="OAuth scopes")
    http_timeout: float = Field(default=10.0, description="Provider request timeout in seconds")
    log_level: str = Field(default="INFO", description="Loguru log level")

    # HTTP server (nested)
    api: ApiSettings = Field(default_factory=ApiSettings)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def to_provider_config(self) -> ProviderConfig:
        """Build the immutable provider config from these settings."""
        config = ProviderConfig.from_mapping(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect": self.redirect,
                "proxy_url": self.proxy_url,
                "device": self.device,
                "state_cookie_name": self.state_cookie_name,
                "state_cookie_time": self.state_cookie_time,
                "scopes": self.scopes,
            }
        )
        return config.with_overrides(timeout=self.http_timeout)


settings = WeixinSettings()
