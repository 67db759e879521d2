"""Liveness and login configuration checks for load balancers and operators.

/status reports whether the Weixin app is configured without echoing the
appid or secret.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from weixin_oauth.settings import settings
from weixin_oauth.version import __version__

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Liveness answer; the service holds no state, so it is always ok."""

    status: str = Field(default="ok", description="Always 'ok' while the process serves requests")
    version: str = Field(default=__version__, description="weixin-oauth package version")


class StatusResponse(HealthResponse):
    """Liveness plus the login settings in effect."""

    configured: bool = Field(description="True when both appid and app secret are set")
    device: str = Field(description="Authorization page variant: pc (QR code) or mobile")
    proxy: bool = Field(description="True when login goes through an authorization proxy")


@router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/status")
async def status() -> StatusResponse:
    """Report which login settings are in effect (secrets omitted)."""
    return StatusResponse(
        configured=bool(settings.client_id and settings.client_secret),
        device=settings.device.value,
        proxy=bool(settings.proxy_url),
    )
