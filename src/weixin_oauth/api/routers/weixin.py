"""Weixin login endpoints.

Public endpoints that drive the stateless login flow:
- /oauth/weixin/login redirects to Weixin and sets the state cookie
- /oauth/weixin/callback verifies the state and returns the user profile
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from loguru import logger

from weixin_oauth.errors import InvalidState, MalformedResponse, ProviderError, TransportError
from weixin_oauth.flow import AuthorizationFlow
from weixin_oauth.providers import get_provider

router = APIRouter(prefix="/oauth/weixin", tags=["Weixin Login"])

# Global flow instance (lazy-initialized)
_flow_instance: AuthorizationFlow | None = None


def get_flow() -> AuthorizationFlow:
    """Get or create the login flow built from settings.

    Use this for dependency injection; tests override it with
    app.dependency_overrides.
    """
    global _flow_instance

    if _flow_instance is None:
        provider = get_provider()
        _flow_instance = AuthorizationFlow(provider.config, provider)

    return _flow_instance


def _get_host(request: Request) -> str | None:
    """Get the public host of the request.

    Behind proxies X-Forwarded-Host may list several hosts; the first one is
    the host the client asked for.
    """
    forwarded = request.headers.get("x-forwarded-host")
    if forwarded:
        host = forwarded.split(",", 1)[0].strip()
        if host:
            return host
    return request.headers.get("host")


@router.get("/login")
async def login(
    request: Request,
    flow: Annotated[AuthorizationFlow, Depends(get_flow)],
) -> RedirectResponse:
    """Start a Weixin login.

    Returns:
        302 redirect to the Weixin authorization page with the state cookie
    """
    redirect = flow.begin_authorization(host=_get_host(request))
    response = RedirectResponse(redirect.url, status_code=status.HTTP_302_FOUND)
    response.headers.append("set-cookie", redirect.set_cookie)
    return response


@router.get("/callback")
async def callback(
    request: Request,
    flow: Annotated[AuthorizationFlow, Depends(get_flow)],
    code: str = Query(default=""),
    state: str = Query(default=""),
) -> JSONResponse:
    """Weixin redirect target.

    The state cookie is cleared on every outcome; a failed attempt has to
    start over at /login.

    Returns:
        User profile as JSON

    Raises:
        HTTPException: 400 on state mismatch, 502 on provider failures
    """
    host = _get_host(request)
    clear_cookie = {"set-cookie": flow.clear_cookie_header(host=host)}
    cookie_value = request.cookies.get(flow.config.state_cookie_name)

    try:
        profile = await flow.complete_authorization(cookie_value, code, state)
    except InvalidState:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_state", "message": "Login expired or forged, please retry"},
            headers=clear_cookie,
        )
    except ProviderError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "provider_error", "errcode": e.errcode, "errmsg": e.errmsg},
            headers=clear_cookie,
        )
    except (TransportError, MalformedResponse) as e:
        logger.error(f"Weixin login failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "provider_unavailable", "message": str(e)},
            headers=clear_cookie,
        )

    return JSONResponse(content=profile.model_dump(), headers=clear_cookie)
