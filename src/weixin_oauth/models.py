"""Data model for the Weixin login flow.

ProviderConfig is immutable once built; use with_overrides() to derive a
changed copy. TokenResponse and UserProfile are built from provider payloads
and keep the raw payload for callers that need unmapped fields.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Device(str, Enum):
    """Client device the login page is rendered for."""

    PC = "pc"
    MOBILE = "mobile"


class ProviderConfig(BaseModel):
    """Weixin OAuth application configuration."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(default="", description="Weixin appid")
    client_secret: str = Field(default="", description="Weixin app secret")
    redirect_url: str = Field(default="", description="Callback URL registered with Weixin")
    scopes: tuple[str, ...] = Field(
        default=("snsapi_login",),
        description="Requested scopes (deduplicated, order preserved)",
    )
    scope_separator: str = Field(default=",", description="Separator used to join scopes")
    proxy_url: str | None = Field(
        default=None,
        description="Authorization proxy; replaces the Weixin endpoint when set",
    )
    device: Device = Field(default=Device.PC, description="pc (QR code) or mobile")
    state_cookie_name: str = Field(default="wx_state_cookie", description="State cookie name")
    state_cookie_ttl: int = Field(default=300, gt=0, description="State cookie lifetime in seconds")
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    @field_validator("scopes", mode="before")
    @classmethod
    def _dedupe_scopes(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        return tuple(dict.fromkeys(value))

    @field_validator("proxy_url", mode="before")
    @classmethod
    def _empty_proxy_is_none(cls, value: Any) -> Any:
        return value or None

    def with_overrides(self, **changes: Any) -> "ProviderConfig":
        """Return a validated copy with the given fields replaced.

        Example:
            >>> config = ProviderConfig(client_id="wx123")
            >>> config.with_overrides(device="mobile").device
            <Device.MOBILE: 'mobile'>
        """
        return type(self).model_validate({**self.model_dump(), **changes})

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ProviderConfig":
        """Build a config from the service configuration keys.

        Accepts client_id, client_secret, redirect, proxy_url, device,
        state_cookie_name, state_cookie_time and scopes. Unknown keys are
        ignored; missing optional keys keep their defaults.

        Args:
            mapping: Service configuration (e.g. from a settings file)

        Returns:
            Validated ProviderConfig
        """
        renames = {"redirect": "redirect_url", "state_cookie_time": "state_cookie_ttl"}
        fields = {}
        for key, value in mapping.items():
            name = renames.get(key, key)
            if name in cls.model_fields and value is not None:
                fields[name] = value
        return cls.model_validate(fields)


class TokenResponse(BaseModel):
    """Access token response from the token endpoint."""

    access_token: str = Field(description="Access token for the user info API")
    open_id: str = Field(description="User id scoped to this app (openid)")
    union_id: str | None = Field(default=None, description="User id across the account's apps")
    expires_in: int | None = Field(default=None, description="Token lifetime in seconds")
    refresh_token: str | None = Field(default=None, description="Refresh token (not used here)")
    scope: str | None = Field(default=None, description="Scopes granted by the user")
    raw: dict[str, Any] = Field(default_factory=dict, description="Full response body")


class UserProfile(BaseModel):
    """Weixin user profile mapped to common fields.

    Weixin never returns a real name or an email, so name and email are
    always None.
    """

    open_id: str = Field(description="User id scoped to this app (openid)")
    union_id: str | None = Field(default=None, description="User id across the account's apps")
    nickname: str | None = Field(default=None, description="Display name")
    avatar_url: str | None = Field(default=None, description="Avatar image URL (headimgurl)")
    name: None = Field(default=None, description="Not provided by Weixin")
    email: None = Field(default=None, description="Not provided by Weixin")
    raw: dict[str, Any] = Field(default_factory=dict, description="Full provider payload")


class AuthorizationRedirect(BaseModel):
    """Result of starting a login: where to redirect and which cookie to set."""

    url: str = Field(description="Provider authorization URL")
    set_cookie: str = Field(description="Set-Cookie header value carrying the state digest")
    state: str = Field(description="Plaintext state embedded in the URL")
