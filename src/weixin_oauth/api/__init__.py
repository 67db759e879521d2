"""Weixin login API module."""


def __getattr__(name: str):
    """Lazy load app so importing routers does not build the application."""
    if name == "app":
        from weixin_oauth.api.main import app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app"]
