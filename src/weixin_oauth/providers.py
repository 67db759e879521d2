"""OAuth provider interface and the Weixin implementation.

The login flow depends only on OAuthProvider, so another authorization code
provider can be plugged in without touching the flow.
"""

from abc import ABC, abstractmethod

from weixin_oauth.authorize import build_authorization_url
from weixin_oauth.client import WeixinClient
from weixin_oauth.models import ProviderConfig, TokenResponse, UserProfile
from weixin_oauth.settings import WeixinSettings, settings as default_settings


class OAuthProvider(ABC):
    """Capabilities an authorization code provider must offer."""

    @abstractmethod
    def build_authorization_url(self, state: str) -> str:
        """Build the provider authorization URL for a state.

        Args:
            state: Plaintext state for this login attempt

        Returns:
            URL to redirect the user agent to
        """
        pass

    @abstractmethod
    async def exchange_code(self, code: str) -> TokenResponse:
        """Exchange an authorization code for an access token.

        Raises:
            WeixinAuthError: Any transport, parse or provider failure
        """
        pass

    @abstractmethod
    async def fetch_profile(self, token: TokenResponse) -> UserProfile:
        """Fetch the user profile for an exchanged token.

        Raises:
            WeixinAuthError: Any transport, parse or provider failure
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get provider identifier."""
        pass


class WeixinProvider(OAuthProvider):
    """Weixin (WeChat) website / in-app login provider."""

    def __init__(self, config: ProviderConfig, client: WeixinClient | None = None):
        """Initialize provider.

        Args:
            config: Provider configuration
            client: API client (defaults to one using config.timeout)
        """
        self.config = config
        self.client = client or WeixinClient(timeout=config.timeout)

    def build_authorization_url(self, state: str) -> str:
        return build_authorization_url(self.config, state)

    async def exchange_code(self, code: str) -> TokenResponse:
        return await self.client.exchange_code(self.config, code)

    async def fetch_profile(self, token: TokenResponse) -> UserProfile:
        return await self.client.fetch_profile(
            token.access_token, token.open_id, timeout=self.config.timeout
        )

    def get_provider_name(self) -> str:
        return "weixin"


def get_provider(settings: WeixinSettings | None = None) -> WeixinProvider:
    """Create the Weixin provider from settings.

    Args:
        settings: Settings to read (defaults to the module settings)

    Returns:
        Configured WeixinProvider
    """
    settings = settings or default_settings
    return WeixinProvider(settings.to_provider_config())
