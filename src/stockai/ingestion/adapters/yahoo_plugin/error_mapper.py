"""
Yahoo Error Mapper

Maps HTTP status codes, response bodies and transport failures to gateway
exception types, with context-rich messages for debugging.
"""

import json
from typing import Any

from stockai.ingestion.ports.http import (
    HttpResponse,
    HttpTimeoutError,
    HttpTransportError,
)

from .exceptions import AuthError, UpstreamError, UpstreamTimeoutError

AUTH_STATUS_CODES = (401, 403)

# Upstream error envelopes are keyed by the API family that produced them
ERROR_ENVELOPE_KEYS = ("chart", "quoteResponse", "quoteSummary", "finance")

MAX_MESSAGE_LENGTH = 200


class YahooErrorMapper:
    """Maps upstream failures to appropriate exception types."""

    @staticmethod
    def extract_error_message(response_body: Any) -> str:
        """Extract error message from a response body.

        Handles the provider's JSON envelope
        (``{"chart": {"error": {"code": ..., "description": ...}}}``),
        flat ``{"error": ...}`` objects and raw text.
        """
        if isinstance(response_body, bytes):
            response_body = response_body.decode("utf-8", errors="replace")

        if isinstance(response_body, str):
            try:
                parsed = json.loads(response_body)
            except ValueError:
                return response_body.strip()[:MAX_MESSAGE_LENGTH]
            response_body = parsed

        if isinstance(response_body, dict):
            for key in ERROR_ENVELOPE_KEYS:
                envelope = response_body.get(key)
                if isinstance(envelope, dict) and isinstance(
                    envelope.get("error"), dict
                ):
                    error = envelope["error"]
                    return error.get("description") or error.get("code") or str(error)
            return str(
                response_body.get("error")
                or response_body.get("message")
                or response_body
            )[:MAX_MESSAGE_LENGTH]

        return str(response_body)[:MAX_MESSAGE_LENGTH]

    @classmethod
    def map_response(cls, response: HttpResponse, url: str) -> UpstreamError:
        """
        Map a non-2xx upstream response to a specific exception.

        Args:
            response: The failed HTTP response
            url: Target URL, without the crumb parameter

        Returns:
            AuthError for 401/403, UpstreamError otherwise
        """
        error_msg = cls.extract_error_message(response.body) or "no body"

        if response.status_code in AUTH_STATUS_CODES:
            return AuthError(
                f"Upstream rejected credentials ({response.status_code}): {error_msg}",
                status_code=response.status_code,
                url=url,
            )
        return UpstreamError(
            f"Upstream error {response.status_code}: {error_msg}",
            status_code=response.status_code,
            url=url,
        )

    @staticmethod
    def map_transport(error: HttpTransportError, url: str) -> UpstreamError:
        """Map a transport failure of the authenticated call."""
        if isinstance(error, HttpTimeoutError):
            return UpstreamTimeoutError(f"Upstream timed out: {error}", url=url)
        return UpstreamError(f"Upstream request failed: {error}", url=url)
