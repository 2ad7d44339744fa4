"""
Observability for the gateway: structured logs for credential refreshes,
upstream calls and API requests, so a failing crumb handshake or a burst of
auth rejections can be traced back to the request that triggered it.
"""

from .logging import (
    get_api_logger,
    get_infrastructure_logger,
    get_ingestion_logger,
    get_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_api_logger",
]
