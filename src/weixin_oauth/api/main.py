"""Weixin login API server.

Running the Server
------------------

Development (with auto-reload):
    weixin-oauth serve --reload

Production:
    weixin-oauth serve --host 0.0.0.0 --port 8000

Endpoints
---------
- /health                   : Health check with version
- /status                   : Configuration summary
- /oauth/weixin/login       : Redirect to Weixin with state cookie
- /oauth/weixin/callback    : Verify state, return user profile
- /docs                     : OpenAPI documentation
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from weixin_oauth.api.routers.health import router as health_router
from weixin_oauth.api.routers.weixin import router as weixin_router
from weixin_oauth.settings import settings
from weixin_oauth.version import __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Weixin login API")
    if not settings.client_id or not settings.client_secret:
        logger.warning("WEIXIN_CLIENT_ID / WEIXIN_CLIENT_SECRET not set, logins will fail")
    yield
    logger.info("Shutting down Weixin login API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Weixin Login API",
        description="Stateless Weixin OAuth2 login with cookie-bound state",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(health_router)  # /health, /status
    app.include_router(weixin_router)  # /oauth/weixin/*

    return app


# Create application instance
app = create_app()


# Main entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "weixin_oauth.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
