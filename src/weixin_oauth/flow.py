"""Stateless Weixin login flow.

Two steps, nothing kept server-side in between:

1. begin_authorization: new state, redirect URL carrying the state and a
   Set-Cookie directive carrying its digest.
2. complete_authorization: verify the callback state against the cookie,
   exchange the code, fetch the profile.

A failed step ends the attempt; the caller restarts the login if it wants a
retry.
"""

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

from loguru import logger

from weixin_oauth.errors import InvalidState
from weixin_oauth.models import AuthorizationRedirect, ProviderConfig, UserProfile
from weixin_oauth.providers import OAuthProvider, WeixinProvider
from weixin_oauth.state import derive_cookie_value, generate_state, verify_state

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def cookie_domain(host: str | None) -> str | None:
    """Strip the port from a Host header value.

    Examples:
        >>> cookie_domain("example.com:8000")
        'example.com'
        >>> cookie_domain("[::1]:8000")
        '[::1]'
    """
    if not host:
        return None
    if host.startswith("["):
        return host.split("]", 1)[0] + "]"
    return host.rsplit(":", 1)[0]


def format_set_cookie(
    name: str,
    value: str,
    max_age: int,
    host: str | None = None,
    now: datetime | None = None,
) -> str:
    """Format a Set-Cookie header value for the state cookie.

    Args:
        name: Cookie name
        value: Cookie value
        max_age: Lifetime in seconds
        host: Request host (domain attribute omitted if None)
        now: Current time (defaults to utcnow)

    Returns:
        Header value with path, domain, expires, Max-Age and httponly
    """
    now = now or datetime.now(timezone.utc)
    expires = now + timedelta(seconds=max_age) if max_age else _EPOCH

    parts = [f"{name}={value}", "path=/"]
    domain = cookie_domain(host)
    if domain:
        parts.append(f"domain={domain}")
    parts.append(f"expires={format_datetime(expires.astimezone(timezone.utc), usegmt=True)}")
    parts.append(f"Max-Age={max_age}")
    parts.append("httponly")
    return "; ".join(parts)


class AuthorizationFlow:
    """Login flow for one provider configuration.

    Holds no per-attempt state, so one instance serves concurrent logins.
    """

    def __init__(self, config: ProviderConfig, provider: OAuthProvider | None = None):
        """Initialize flow.

        Args:
            config: Provider configuration (cookie name and TTL are read here)
            provider: Provider implementation (defaults to WeixinProvider)
        """
        self.config = config
        self.provider = provider or WeixinProvider(config)

    def begin_authorization(
        self,
        host: str | None = None,
        now: datetime | None = None,
    ) -> AuthorizationRedirect:
        """Start a login attempt.

        Args:
            host: Host of the incoming request, used as cookie domain
            now: Current time for the cookie expiry (defaults to utcnow)

        Returns:
            AuthorizationRedirect with URL and Set-Cookie header value
        """
        state = generate_state()
        url = self.provider.build_authorization_url(state)
        set_cookie = format_set_cookie(
            self.config.state_cookie_name,
            derive_cookie_value(state),
            self.config.state_cookie_ttl,
            host=host,
            now=now,
        )

        logger.info(
            f"Starting {self.provider.get_provider_name()} login "
            f"(device={self.config.device.value}, proxy={bool(self.config.proxy_url)})"
        )
        return AuthorizationRedirect(url=url, set_cookie=set_cookie, state=state)

    async def complete_authorization(
        self,
        cookie_value: str | None,
        code: str,
        state: str | None,
    ) -> UserProfile:
        """Finish a login attempt from the callback request.

        Args:
            cookie_value: State cookie value (None if the cookie is absent)
            code: `code` query parameter
            state: `state` query parameter

        Returns:
            UserProfile of the logged-in user

        Raises:
            InvalidState: Cookie missing, expired or not matching state
            TransportError: Provider unreachable or timed out
            MalformedResponse: Provider payload unusable
            ProviderError: Provider returned an errcode payload
        """
        if not verify_state(cookie_value, state):
            logger.warning(
                f"Rejected login callback: state check failed (cookie present={bool(cookie_value)})"
            )
            raise InvalidState("state cookie missing or does not match callback state")

        token = await self.provider.exchange_code(code)
        profile = await self.provider.fetch_profile(token)

        logger.info(f"Completed {self.provider.get_provider_name()} login: openid={profile.open_id}")
        return profile

    def clear_cookie_header(self, host: str | None = None) -> str:
        """Set-Cookie header value that discards the state cookie."""
        return format_set_cookie(self.config.state_cookie_name, "deleted", 0, host=host)
