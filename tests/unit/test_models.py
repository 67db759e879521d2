"""Test provider configuration and settings mapping."""

import pytest
from pydantic import ValidationError

from weixin_oauth.models import Device, ProviderConfig, UserProfile
from weixin_oauth.settings import WeixinSettings


def test_defaults():
    """Test defaults match the service configuration defaults."""
    config = ProviderConfig()

    assert config.device == Device.PC
    assert config.scopes == ("snsapi_login",)
    assert config.state_cookie_name == "wx_state_cookie"
    assert config.state_cookie_ttl == 300
    assert config.proxy_url is None


def test_config_is_frozen():
    """Test fields cannot be set after construction."""
    config = ProviderConfig(client_id="wx1")
    with pytest.raises(ValidationError):
        config.client_id = "wx2"


def test_with_overrides_returns_new_config():
    """Test overrides leave the original untouched."""
    config = ProviderConfig(client_id="wx1")
    changed = config.with_overrides(client_id="wx2", device="mobile")

    assert config.client_id == "wx1"
    assert config.device == Device.PC
    assert changed.client_id == "wx2"
    assert changed.device == Device.MOBILE


def test_with_overrides_validates():
    """Test overrides go through validation."""
    with pytest.raises(ValidationError):
        ProviderConfig().with_overrides(device="tablet")


@pytest.mark.parametrize("ttl", [0, -1])
def test_state_cookie_ttl_must_be_positive(ttl):
    """Test a zero or negative cookie lifetime is rejected."""
    with pytest.raises(ValidationError):
        ProviderConfig(state_cookie_ttl=ttl)
    with pytest.raises(ValidationError):
        ProviderConfig().with_overrides(state_cookie_ttl=ttl)


def test_scopes_deduplicated():
    """Test duplicate scopes are dropped, order kept."""
    config = ProviderConfig(scopes=["snsapi_userinfo", "snsapi_base", "snsapi_userinfo"])
    assert config.scopes == ("snsapi_userinfo", "snsapi_base")


def test_from_mapping_renames_keys():
    """Test service configuration keys map onto config fields."""
    config = ProviderConfig.from_mapping(
        {
            "client_id": "wx1",
            "client_secret": "secret",
            "redirect": "https://example.com/cb",
            "proxy_url": "https://proxy.example.com",
            "device": "mobile",
            "state_cookie_name": "my_state",
            "state_cookie_time": 60,
            "scopes": ["snsapi_userinfo"],
            "unrelated": "ignored",
        }
    )

    assert config.redirect_url == "https://example.com/cb"
    assert config.state_cookie_ttl == 60
    assert config.state_cookie_name == "my_state"
    assert config.device == Device.MOBILE
    assert config.proxy_url == "https://proxy.example.com"
    assert config.scopes == ("snsapi_userinfo",)


def test_from_mapping_keeps_defaults_for_missing_keys():
    """Test optional keys default when absent or None."""
    config = ProviderConfig.from_mapping(
        {"client_id": "wx1", "client_secret": "s", "redirect": "https://cb", "proxy_url": None}
    )

    assert config.device == Device.PC
    assert config.proxy_url is None
    assert config.state_cookie_name == "wx_state_cookie"
    assert config.state_cookie_ttl == 300


def test_settings_to_provider_config():
    """Test settings build the provider config."""
    settings = WeixinSettings(
        _env_file=None,
        client_id="wx1",
        client_secret="secret",
        redirect="https://example.com/cb",
        device="mobile",
        state_cookie_time=120,
        http_timeout=3.5,
    )
    config = settings.to_provider_config()

    assert config.client_id == "wx1"
    assert config.redirect_url == "https://example.com/cb"
    assert config.device == Device.MOBILE
    assert config.state_cookie_ttl == 120
    assert config.timeout == 3.5


def test_settings_from_env(monkeypatch):
    """Test WEIXIN_ environment variables are read."""
    monkeypatch.setenv("WEIXIN_CLIENT_ID", "wx-env")
    monkeypatch.setenv("WEIXIN_SCOPES", '["snsapi_base"]')

    config = WeixinSettings(_env_file=None).to_provider_config()

    assert config.client_id == "wx-env"
    assert config.scopes == ("snsapi_base",)


def test_user_profile_never_has_name_or_email():
    """Test name and email stay None."""
    profile = UserProfile(open_id="O")
    assert profile.name is None
    assert profile.email is None
