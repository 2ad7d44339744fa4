"""
Yahoo Gateway Exception Hierarchy

Distinguishes failures of the cookie + crumb handshake from failures of the
authenticated data call itself, so callers can tell "could not log in" apart
from "upstream refused or broke".
"""


class YahooGatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self, message: str, status_code: int | None = None, url: str | None = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


class AcquisitionError(YahooGatewayError):
    """Cookie harvest or crumb fetch failed (network, timeout, non-2xx, empty crumb)."""

    pass


class AcquisitionTimeoutError(AcquisitionError):
    """Cookie harvest or crumb fetch timed out."""

    pass


class UpstreamError(YahooGatewayError):
    """Authenticated upstream call failed (non-2xx or network failure)."""

    pass


class UpstreamTimeoutError(UpstreamError):
    """Authenticated upstream call timed out."""

    pass


class AuthError(UpstreamError):
    """401/403 - crumb or session cookies rejected by the provider."""

    pass
