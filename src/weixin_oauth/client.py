"""HTTP client for the Weixin token and user info endpoints.

Both endpoints answer HTTP 200 with an errcode/errmsg body on failure, so
every payload is checked for errcode before its fields are read.
"""

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from weixin_oauth.errors import MalformedResponse, ProviderError, TransportError
from weixin_oauth.models import ProviderConfig, TokenResponse, UserProfile

TOKEN_URL = "https://api.weixin.qq.com/sns/oauth2/access_token"
USERINFO_URL = "https://api.weixin.qq.com/sns/userinfo"

# Locale for nickname and region fields of the user info API
USERINFO_LANG = "zh_CN"


class WeixinClient:
    """Calls the two Weixin APIs used by the login flow.

    An httpx.AsyncClient may be injected (shared connection pool, or a mock
    transport in tests); it is then reused and never closed here. Without
    one, each call opens a short-lived client.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        """Initialize client.

        Args:
            http_client: Optional shared async HTTP client
            timeout: Per-request timeout in seconds
        """
        self.http_client = http_client
        self.timeout = timeout

    async def exchange_code(self, config: ProviderConfig, code: str) -> TokenResponse:
        """Exchange an authorization code for an access token.

        Args:
            config: Provider configuration (appid and secret)
            code: Authorization code from the callback

        Returns:
            TokenResponse with access token and openid

        Raises:
            TransportError: Network failure, timeout or non-2xx status
            MalformedResponse: Body unparseable, missing openid/access_token or wrongly typed
            ProviderError: Weixin returned an errcode payload
        """
        params = {
            "appid": config.client_id,
            "secret": config.client_secret,
            "code": code,
            "grant_type": "authorization_code",
        }
        payload = await self._get_json(TOKEN_URL, params, timeout=config.timeout)

        for field in ("openid", "access_token"):
            if not payload.get(field):
                raise MalformedResponse(f"token response missing '{field}'")

        try:
            token = TokenResponse(
                access_token=payload["access_token"],
                open_id=payload["openid"],
                union_id=payload.get("unionid"),
                expires_in=payload.get("expires_in"),
                refresh_token=payload.get("refresh_token"),
                scope=payload.get("scope"),
                raw=payload,
            )
        except ValidationError as e:
            raise MalformedResponse(f"token response has invalid fields: {e.error_count()} error(s)") from e

        logger.debug(f"Exchanged code for token: openid={token.open_id}")
        return token

    async def fetch_profile(
        self,
        access_token: str,
        open_id: str,
        timeout: float | None = None,
    ) -> UserProfile:
        """Fetch the user profile for an access token.

        The openid of the profile is taken from the response body as
        returned; open_id is only sent as a request parameter.

        Args:
            access_token: Access token from exchange_code
            open_id: openid from exchange_code
            timeout: Request timeout in seconds (defaults to the client timeout)

        Returns:
            UserProfile with name and email always None

        Raises:
            TransportError: Network failure, timeout or non-2xx status
            MalformedResponse: Body unparseable, missing openid or wrongly typed
            ProviderError: Weixin returned an errcode payload
        """
        params = {
            "access_token": access_token,
            "openid": open_id,
            "lang": USERINFO_LANG,
        }
        payload = await self._get_json(USERINFO_URL, params, timeout=timeout)

        if not payload.get("openid"):
            raise MalformedResponse("user info response missing 'openid'")

        try:
            return UserProfile(
                open_id=payload["openid"],
                union_id=payload.get("unionid"),
                nickname=payload.get("nickname"),
                avatar_url=payload.get("headimgurl"),
                raw=payload,
            )
        except ValidationError as e:
            raise MalformedResponse(f"user info response has invalid fields: {e.error_count()} error(s)") from e

    async def _get_json(
        self,
        url: str,
        params: dict[str, str],
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """GET url and return the decoded JSON object.

        Raises:
            TransportError: Network failure, timeout or non-2xx status
            MalformedResponse: Body is not a JSON object
            ProviderError: Body carries a non-zero errcode
        """
        timeout = timeout or self.timeout
        logger.debug(f"GET {url}")
        try:
            if self.http_client is not None:
                response = await self.http_client.get(url, params=params, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"Timed out calling {url}")
            raise TransportError(f"timeout calling {url}") from e
        except httpx.HTTPStatusError as e:
            # str(e) embeds the full URL, secret included
            status_code = e.response.status_code
            logger.warning(f"{url} answered HTTP {status_code}")
            raise TransportError(f"{url} answered HTTP {status_code}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Request to {url} failed: {type(e).__name__}")
            raise TransportError(f"request to {url} failed: {type(e).__name__}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse(f"non-JSON body from {url}") from e

        if not isinstance(payload, dict):
            raise MalformedResponse(f"expected JSON object from {url}")

        errcode = payload.get("errcode")
        if errcode not in (None, 0, "0"):
            logger.warning(f"Weixin error from {url}: {errcode} {payload.get('errmsg')}")
            raise ProviderError(errcode, payload.get("errmsg"))

        return payload
