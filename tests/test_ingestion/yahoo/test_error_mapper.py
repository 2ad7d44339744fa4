"""Tests for YahooErrorMapper."""

import pytest

from stockai.ingestion.adapters.yahoo_plugin import (
    AuthError,
    UpstreamError,
    UpstreamTimeoutError,
)
from stockai.ingestion.adapters.yahoo_plugin.error_mapper import YahooErrorMapper
from stockai.ingestion.ports.http import HttpTimeoutError, HttpTransportError
from tests.fixtures.upstream import make_response

URL = "https://query1.finance.yahoo.com/v7/finance/quote?symbols=AAPL"


class TestExtractErrorMessage:
    def test_chart_envelope(self):
        body = b'{"chart":{"result":null,"error":{"code":"Not Found","description":"No data found"}}}'
        assert YahooErrorMapper.extract_error_message(body) == "No data found"

    def test_finance_envelope(self):
        body = b'{"finance":{"result":null,"error":{"code":"Unauthorized","description":"Invalid Crumb"}}}'
        assert YahooErrorMapper.extract_error_message(body) == "Invalid Crumb"

    def test_envelope_without_description_uses_code(self):
        body = b'{"quoteSummary":{"error":{"code":"Bad Request"}}}'
        assert YahooErrorMapper.extract_error_message(body) == "Bad Request"

    def test_flat_error_object(self):
        assert YahooErrorMapper.extract_error_message({"error": "boom"}) == "boom"

    def test_plain_text(self):
        assert YahooErrorMapper.extract_error_message(b"Too Many Requests\n") == "Too Many Requests"

    def test_long_text_is_truncated(self):
        message = YahooErrorMapper.extract_error_message(b"<html>" + b"x" * 1000)
        assert len(message) == 200


class TestMapResponse:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses(self, status):
        error = YahooErrorMapper.map_response(make_response(status_code=status), URL)
        assert isinstance(error, AuthError)
        assert isinstance(error, UpstreamError)
        assert error.status_code == status
        assert error.url == URL

    @pytest.mark.parametrize("status", [400, 404, 429, 500, 502])
    def test_other_statuses(self, status):
        error = YahooErrorMapper.map_response(make_response(status_code=status), URL)
        assert type(error) is UpstreamError
        assert str(status) in str(error)

    def test_empty_body(self):
        error = YahooErrorMapper.map_response(make_response(status_code=500, body=b""), URL)
        assert "no body" in str(error)


class TestMapTransport:
    def test_timeout(self):
        error = YahooErrorMapper.map_transport(HttpTimeoutError("slow"), URL)
        assert isinstance(error, UpstreamTimeoutError)

    def test_connection_error(self):
        error = YahooErrorMapper.map_transport(HttpTransportError("refused"), URL)
        assert type(error) is UpstreamError
        assert error.status_code is None
