"""Dependency injection container for the Yahoo gateway.

This is the single place where concrete implementations are chosen.

Usage:
    container = YahooDependencyContainer()
    forwarder = container.forwarder
    response = await forwarder.forward(container.endpoints.quote_url("AAPL"))
    await container.close()
"""

from stockai.config.state import ConfigState
from stockai.ingestion.adapters.yahoo_plugin.credential_store import CredentialStore
from stockai.ingestion.adapters.yahoo_plugin.endpoints import YahooEndpoints
from stockai.ingestion.adapters.yahoo_plugin.forwarder import UpstreamForwarder
from stockai.ingestion.config.value_objects import YahooGatewayConfig
from stockai.ingestion.connectors.aiohttp_client import AiohttpClient
from stockai.ingestion.ports import IHttpClient


class YahooDependencyContainer:
    """Dependency injection container for the credential store and forwarder.

    Responsible for:
    1. Choosing concrete implementations for each protocol
    2. Wiring dependencies together
    3. Holding the single shared CredentialStore for the process

    Tests can subclass this and override ``create_*`` methods to inject fakes.
    """

    def __init__(self, config: YahooGatewayConfig | None = None):
        self.config = config or YahooGatewayConfig()
        self._http_client: IHttpClient | None = None
        self._credential_store: CredentialStore | None = None
        self._forwarder: UpstreamForwarder | None = None

    def create_http_client(self) -> IHttpClient:
        """Create HTTP client implementation.

        Override this in tests to inject a fake HTTP client.
        """
        return AiohttpClient(self.config.http_config)

    def create_credential_store(self) -> CredentialStore:
        return CredentialStore(self.config.crumb_config, self.http_client)

    def create_forwarder(self) -> UpstreamForwarder:
        return UpstreamForwarder(
            config=self.config.forwarder_config,
            credential_provider=self.credential_store,
            http_client=self.http_client,
        )

    @property
    def http_client(self) -> IHttpClient:
        if self._http_client is None:
            self._http_client = self.create_http_client()
        return self._http_client

    @property
    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            self._credential_store = self.create_credential_store()
        return self._credential_store

    @property
    def forwarder(self) -> UpstreamForwarder:
        if self._forwarder is None:
            self._forwarder = self.create_forwarder()
        return self._forwarder

    @property
    def endpoints(self) -> YahooEndpoints:
        return YahooEndpoints(self.config.query_base_url, self.config.page_base_url)

    async def close(self) -> None:
        """Release the HTTP session."""
        if self._http_client is not None:
            await self._http_client.close()


def create_container_from_settings(settings: ConfigState) -> YahooDependencyContainer:
    """Factory bridging the settings object and the DI container."""
    return YahooDependencyContainer(YahooGatewayConfig.from_settings(settings.yahoo))
