"""Ports (protocols) the ingestion layer depends on."""

from .http import (  # noqa: F401
    HttpResponse,
    HttpTimeoutError,
    HttpTransportError,
    ICredentialProvider,
    IHttpClient,
)

__all__ = [
    "IHttpClient",
    "ICredentialProvider",
    "HttpResponse",
    "HttpTransportError",
    "HttpTimeoutError",
]
