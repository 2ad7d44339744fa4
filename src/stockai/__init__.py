"""
StockAI market data gateway.
Forwards market data requests to Yahoo Finance, handling the
cookie + crumb session handshake transparently.

Modules:
- ingestion: Upstream credentials, forwarding and HTTP transport
- infrastructure: Logging
- config: Application configuration
"""

__version__ = "0.1.0"
