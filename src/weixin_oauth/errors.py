"""Typed failures raised by the Weixin login flow.

Every failure of a callback is terminal for that callback. Callers decide
whether to restart the login (a fresh authorization redirect).
"""


class WeixinAuthError(Exception):
    """Base class for all login flow failures."""


class InvalidState(WeixinAuthError):
    """State cookie missing, expired or not matching the callback state."""


class TransportError(WeixinAuthError):
    """Provider unreachable, timed out or answered with a non-2xx status."""


class MalformedResponse(WeixinAuthError):
    """Provider body is not a JSON object or lacks a required field."""


class ProviderError(WeixinAuthError):
    """Provider answered with an error payload (errcode/errmsg).

    Attributes:
        errcode: Provider error code (e.g. 40029 for an invalid code)
        errmsg: Provider error message
    """

    def __init__(self, errcode: int | str, errmsg: str | None = None):
        self.errcode = errcode
        self.errmsg = errmsg or ""
        super().__init__(f"provider error {errcode}: {self.errmsg}")
