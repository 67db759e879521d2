"""Test authorization URL construction."""

from urllib.parse import parse_qs, urlsplit

import pytest

from weixin_oauth.authorize import (
    MOBILE_AUTHORIZE_URL,
    QRCONNECT_URL,
    build_authorization_url,
    build_code_fields,
    select_endpoint,
)
from weixin_oauth.models import Device, ProviderConfig


@pytest.fixture
def config():
    """PC config without proxy."""
    return ProviderConfig(
        client_id="APPID",
        client_secret="SECRET",
        redirect_url="https://cb",
        scopes=["snsapi_login"],
    )


def test_pc_url(config):
    """Test the PC QR code login URL."""
    url = build_authorization_url(config, "ABC")

    assert url.startswith("https://open.weixin.qq.com/connect/qrconnect?")
    assert "appid=APPID" in url
    assert "redirect_uri=https%3A%2F%2Fcb" in url
    assert "response_type=code" in url
    assert "scope=snsapi_login" in url
    assert "state=ABC" in url
    assert url.endswith("#wechat_redirect")


def test_fragment_follows_query(config):
    """Test #wechat_redirect is a fragment, not part of the query."""
    parts = urlsplit(build_authorization_url(config, "ABC"))

    assert parts.fragment == "wechat_redirect"
    assert parse_qs(parts.query)["state"] == ["ABC"]


def test_pc_url_has_no_device(config):
    """Test device is only sent to a proxy."""
    assert "device" not in build_code_fields(config, "ABC")


def test_mobile_endpoint(config):
    """Test mobile uses the in-app OAuth page."""
    mobile = config.with_overrides(device=Device.MOBILE)

    assert select_endpoint(mobile) == MOBILE_AUTHORIZE_URL
    assert build_authorization_url(mobile, "ABC").startswith(MOBILE_AUTHORIZE_URL + "?")


def test_pc_endpoint(config):
    """Test PC uses the QR code page."""
    assert select_endpoint(config) == QRCONNECT_URL


@pytest.mark.parametrize("device", ["pc", "mobile"])
def test_proxy_url(config, device):
    """Test a proxy replaces the endpoint and receives the device."""
    proxied = config.with_overrides(proxy_url="https://proxy.example.com/wx/auth", device=device)
    url = build_authorization_url(proxied, "ABC")
    query = parse_qs(urlsplit(url).query)

    assert url.startswith("https://proxy.example.com/wx/auth?")
    assert query["device"] == [device]
    assert query["appid"] == ["APPID"]
    assert url.endswith("#wechat_redirect")


def test_empty_proxy_url_is_ignored(config):
    """Test an empty proxy setting falls back to the Weixin endpoint."""
    assert select_endpoint(config.with_overrides(proxy_url="")) == QRCONNECT_URL


def test_scopes_joined_with_separator(config):
    """Test scopes are deduplicated and comma joined."""
    multi = config.with_overrides(scopes=["snsapi_base", "snsapi_userinfo", "snsapi_base"])
    fields = build_code_fields(multi, "ABC")

    assert fields["scope"] == "snsapi_base,snsapi_userinfo"


def test_custom_scope_separator(config):
    """Test a configured separator is used."""
    spaced = config.with_overrides(scopes=["a", "b"], scope_separator=" ")
    assert build_code_fields(spaced, "ABC")["scope"] == "a b"


def test_missing_client_id_gives_empty_param():
    """Test missing appid yields an empty parameter, not an error."""
    url = build_authorization_url(ProviderConfig(), "ABC")
    assert "appid=&" in url
