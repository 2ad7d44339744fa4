"""Yahoo Finance gateway: crumb credential cache and authenticated forwarding."""

from .credential_store import CredentialState, Credentials, CredentialStore
from .dependency_container import (
    YahooDependencyContainer,
    create_container_from_settings,
)
from .endpoints import YahooEndpoints
from .exceptions import (
    AcquisitionError,
    AcquisitionTimeoutError,
    AuthError,
    UpstreamError,
    UpstreamTimeoutError,
    YahooGatewayError,
)
from .forwarder import ForwardedResponse, UpstreamForwarder

__all__ = [
    "AcquisitionError",
    "AcquisitionTimeoutError",
    "AuthError",
    "CredentialState",
    "CredentialStore",
    "Credentials",
    "ForwardedResponse",
    "UpstreamError",
    "UpstreamForwarder",
    "UpstreamTimeoutError",
    "YahooDependencyContainer",
    "YahooEndpoints",
    "YahooGatewayError",
    "create_container_from_settings",
]
