"""Stateless Weixin (WeChat) OAuth2 login.

This module provides the server side of the Weixin authorization code flow:
- State tokens bound to a hashed cookie instead of a server session
- Authorization URL for PC (QR code), mobile or a proxy endpoint
- Code exchange and user info fetch against the Weixin APIs
- A login flow composing the above behind a provider interface
"""

from weixin_oauth.errors import (
    InvalidState,
    MalformedResponse,
    ProviderError,
    TransportError,
    WeixinAuthError,
)
from weixin_oauth.flow import AuthorizationFlow
from weixin_oauth.models import (
    AuthorizationRedirect,
    Device,
    ProviderConfig,
    TokenResponse,
    UserProfile,
)
from weixin_oauth.providers import OAuthProvider, WeixinProvider, get_provider
from weixin_oauth.version import __version__

__all__ = [
    "AuthorizationFlow",
    "AuthorizationRedirect",
    "Device",
    "InvalidState",
    "MalformedResponse",
    "OAuthProvider",
    "ProviderConfig",
    "ProviderError",
    "TokenResponse",
    "TransportError",
    "UserProfile",
    "WeixinAuthError",
    "WeixinProvider",
    "get_provider",
    "__version__",
]
