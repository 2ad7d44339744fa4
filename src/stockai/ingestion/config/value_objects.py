"""Configuration value objects for dependency injection.

Instead of injecting the global settings object, inject specific configuration
dataclasses into each component. Enables:
- Easy testing with different configurations (short TTLs, tiny timeouts)
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass

from stockai.config.state import DEFAULT_USER_AGENT, YahooConfig


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 15.0
    max_redirects: int = 5
    max_header_size: int = 32768


@dataclass(frozen=True)
class CrumbConfig:
    """Configuration for the cookie + crumb handshake."""

    landing_url: str = "https://finance.yahoo.com/"
    crumb_url: str = "https://query1.finance.yahoo.com/v1/test/getcrumb"
    user_agent: str = DEFAULT_USER_AGENT
    ttl: float = 3600.0
    landing_timeout: float = 15.0
    crumb_timeout: float = 10.0


@dataclass(frozen=True)
class ForwarderConfig:
    """Configuration for authenticated upstream calls."""

    user_agent: str = DEFAULT_USER_AGENT
    data_timeout: float = 15.0
    page_timeout: float = 12.0
    token_param: str = "crumb"


@dataclass(frozen=True)
class YahooGatewayConfig:
    """Configuration bundle for the Yahoo gateway components."""

    query_base_url: str = "https://query1.finance.yahoo.com"
    page_base_url: str = "https://finance.yahoo.com"
    http_config: HttpClientConfig = None
    crumb_config: CrumbConfig = None
    forwarder_config: ForwarderConfig = None

    def __post_init__(self):
        """Set defaults for nested configs."""
        if self.http_config is None:
            object.__setattr__(self, "http_config", HttpClientConfig())
        if self.crumb_config is None:
            object.__setattr__(self, "crumb_config", CrumbConfig())
        if self.forwarder_config is None:
            object.__setattr__(self, "forwarder_config", ForwarderConfig())

    @classmethod
    def from_settings(cls, yahoo: YahooConfig) -> "YahooGatewayConfig":
        """Build value objects from the validated settings section."""
        return cls(
            query_base_url=yahoo.query_base_url,
            page_base_url=yahoo.page_base_url,
            http_config=HttpClientConfig(
                timeout=yahoo.data_timeout,
                max_redirects=yahoo.max_redirects,
                max_header_size=yahoo.max_header_size,
            ),
            crumb_config=CrumbConfig(
                landing_url=yahoo.landing_url,
                crumb_url=yahoo.crumb_url,
                user_agent=yahoo.user_agent,
                ttl=yahoo.crumb_ttl,
                landing_timeout=yahoo.landing_timeout,
                crumb_timeout=yahoo.crumb_timeout,
            ),
            forwarder_config=ForwarderConfig(
                user_agent=yahoo.user_agent,
                data_timeout=yahoo.data_timeout,
                page_timeout=yahoo.page_timeout,
            ),
        )
