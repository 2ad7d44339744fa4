"""
Root conftest: shared fixtures for the gateway tests.
"""

import sys
from pathlib import Path

import pytest

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from stockai.ingestion.adapters.yahoo_plugin import (  # noqa: E402
    CredentialStore,
    UpstreamForwarder,
)
from stockai.ingestion.config.value_objects import (  # noqa: E402
    CrumbConfig,
    ForwarderConfig,
)
from tests.fixtures.upstream import FakeClock, FakeYahooUpstream  # noqa: E402

TTL = 3600.0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeYahooUpstream:
    return FakeYahooUpstream()


@pytest.fixture
def store(upstream, clock) -> CredentialStore:
    return CredentialStore(CrumbConfig(ttl=TTL), upstream, clock=clock)


@pytest.fixture
def forwarder(store, upstream) -> UpstreamForwarder:
    return UpstreamForwarder(ForwarderConfig(), store, upstream)
