"""Authorization redirect URL for the Weixin login page."""

from typing import Any
from urllib.parse import urlencode

from weixin_oauth.models import Device, ProviderConfig

QRCONNECT_URL = "https://open.weixin.qq.com/connect/qrconnect"
MOBILE_AUTHORIZE_URL = "https://open.weixin.qq.com/connect/oauth2/authorize"

# Weixin requires this fragment after the query string
REDIRECT_FRAGMENT = "#wechat_redirect"


def select_endpoint(config: ProviderConfig) -> str:
    """Pick the authorization endpoint.

    A configured proxy wins; otherwise PC uses the QR code login page and
    every other device the in-app OAuth page.
    """
    if config.proxy_url:
        return config.proxy_url
    if config.device == Device.PC:
        return QRCONNECT_URL
    return MOBILE_AUTHORIZE_URL


def build_code_fields(config: ProviderConfig, state: str) -> dict[str, Any]:
    """Query parameters of the authorization URL.

    The device parameter is only sent to a proxy, which uses it to pick the
    real Weixin endpoint.
    """
    fields = {
        "appid": config.client_id,
        "redirect_uri": config.redirect_url,
        "response_type": "code",
        "scope": config.scope_separator.join(config.scopes),
        "state": state,
    }
    if config.proxy_url:
        fields["device"] = config.device.value
    return fields


def build_authorization_url(config: ProviderConfig, state: str) -> str:
    """Build the URL the user agent is redirected to.

    Args:
        config: Provider configuration
        state: Plaintext state for this login attempt

    Returns:
        Endpoint with form-encoded query and trailing #wechat_redirect

    Example:
        >>> config = ProviderConfig(client_id="APPID", redirect_url="https://cb")
        >>> build_authorization_url(config, "ABC")
        'https://open.weixin.qq.com/connect/qrconnect?appid=APPID&redirect_uri=https%3A%2F%2Fcb&response_type=code&scope=snsapi_login&state=ABC#wechat_redirect'
    """
    query = urlencode(build_code_fields(config, state))
    return f"{select_endpoint(config)}?{query}{REDIRECT_FRAGMENT}"
