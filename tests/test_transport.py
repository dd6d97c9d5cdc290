"""Tests for transport policy - behavior focused with HTTP mocking."""

import logging
from types import SimpleNamespace

import httpx
import pytest
from unittest.mock import MagicMock

from managed_retry.exceptions import BailedError, RetriesExhaustedError
from managed_retry.retry import RetryConfig
from managed_retry.transport import (
    DEFAULT_SKIP_STATUS_CODES,
    TransportRetryPolicy,
    bail_on_status_codes,
    extract_status_code,
    transport_retry,
    with_transport_retry,
)


# --- Helpers ---


def create_status_error(status_code: int) -> httpx.HTTPStatusError:
    """Create an httpx status error with a proper request and response."""
    request = httpx.Request("GET", "http://test/items")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"status {status_code}", request=request, response=response
    )


class ResponseError(Exception):
    """Error shaped like a non-httpx client error carrying a response."""

    def __init__(self, response):
        super().__init__("response error")
        self.response = response


class StatusError(Exception):
    """Error with its own status attribute, like aiohttp's ClientResponseError."""

    def __init__(self, status):
        super().__init__("status error")
        self.status = status


def failing(error: Exception):
    """Async operation that always raises error, counting calls."""

    async def operation():
        operation.calls += 1
        raise error

    operation.calls = 0
    return operation


FAST_OVERRIDES = {"min_delay": 0.001, "max_delay": 0.01, "randomize": False}


# --- Status extraction ---


class TestExtractStatusCode:
    """Test status code extraction."""

    def test_reads_httpx_status_error(self):
        """httpx.HTTPStatusError exposes its response status."""
        assert extract_status_code(create_status_error(404)) == 404

    def test_reads_response_status_code(self):
        """Errors with response.status_code are recognized structurally."""
        error = ResponseError(SimpleNamespace(status_code=409))
        assert extract_status_code(error) == 409

    def test_reads_response_status(self):
        """Errors with response.status are recognized structurally."""
        error = ResponseError(SimpleNamespace(status=502))
        assert extract_status_code(error) == 502

    def test_reads_error_status(self):
        """Errors carrying their own status attribute are recognized."""
        assert extract_status_code(StatusError(429)) == 429

    def test_plain_error_has_no_status(self):
        """Errors without a response shape yield None."""
        assert extract_status_code(RuntimeError("boom")) is None

    def test_response_without_status_has_no_status(self):
        """A response object lacking a status yields None."""
        assert extract_status_code(ResponseError(SimpleNamespace())) is None

    def test_non_integer_status_ignored(self):
        """Only real integers count as status codes."""
        assert extract_status_code(StatusError("400")) is None
        assert extract_status_code(StatusError(True)) is None


class TestBailOnStatusCodes:
    """Test the status-code bail predicate."""

    def test_bails_on_listed_status(self):
        """Listed statuses bail."""
        bail_on = bail_on_status_codes({400, 422})
        assert bail_on(create_status_error(400)) is True
        assert bail_on(create_status_error(422)) is True

    def test_does_not_bail_on_other_status(self):
        """Unlisted statuses are retried."""
        bail_on = bail_on_status_codes({400})
        assert bail_on(create_status_error(503)) is False

    def test_does_not_bail_without_status(self):
        """Errors without a status never bail."""
        bail_on = bail_on_status_codes({400})
        assert bail_on(ConnectionError("reset")) is False


# --- Policy ---


class TestWithTransportRetry:
    """Test policy construction."""

    def test_defaults(self):
        """Default policy retries 3 times, caps at 5s, and skips 400."""
        policy = with_transport_retry()

        assert policy.config.max_retries == 3
        assert policy.config.max_delay == 5.0
        assert policy.skip_status_codes == DEFAULT_SKIP_STATUS_CODES == {400}

    def test_overrides_replace_defaults(self):
        """Overrides apply on top of the transport defaults."""
        policy = with_transport_retry({404, 409}, max_retries=7, min_delay=0.1, max_delay=1.0)

        assert policy.config.max_retries == 7
        assert policy.config.max_delay == 1.0
        assert policy.config.backoff_factor == RetryConfig().backoff_factor
        assert policy.skip_status_codes == {404, 409}

    def test_invalid_overrides_rejected(self):
        """Overrides are validated like any RetryConfig."""
        with pytest.raises(ValueError):
            with_transport_retry(max_retries=-1)

    def test_policy_exposes_bail_predicate(self):
        """Policy bail_on follows skip_status_codes."""
        policy = TransportRetryPolicy(skip_status_codes=frozenset({418}))

        assert policy.bail_on(create_status_error(418)) is True
        assert policy.bail_on(create_status_error(400)) is False


class TestTransportRun:
    """Test running operations under the transport policy."""

    @pytest.mark.asyncio
    async def test_bails_once_on_skipped_status(self):
        """A 400 error is tried exactly once and surfaces as BailedError."""
        policy = with_transport_retry({400}, **FAST_OVERRIDES)
        error = create_status_error(400)
        operation = failing(error)
        observer = MagicMock()

        with pytest.raises(BailedError) as exc_info:
            await policy.run(operation, on_retry=observer)

        assert operation.calls == 1
        observer.assert_not_called()
        assert exc_info.value.last_error is error

    @pytest.mark.asyncio
    async def test_retries_other_status_until_exhausted(self):
        """A 503 error uses the whole budget."""
        policy = with_transport_retry(**FAST_OVERRIDES)
        operation = failing(create_status_error(503))

        with pytest.raises(RetriesExhaustedError):
            await policy.run(operation)

        assert operation.calls == 4

    @pytest.mark.asyncio
    async def test_retries_errors_without_status(self):
        """Errors without a status are retried until exhausted."""
        policy = with_transport_retry(max_retries=2, **FAST_OVERRIDES)
        operation = failing(ConnectionError("reset"))

        with pytest.raises(RetriesExhaustedError):
            await policy.run(operation)

        assert operation.calls == 3

    @pytest.mark.asyncio
    async def test_custom_codes_replace_default(self):
        """With custom codes, 400 is no longer skipped."""
        policy = with_transport_retry({404}, max_retries=1, **FAST_OVERRIDES)
        operation = failing(create_status_error(400))

        with pytest.raises(RetriesExhaustedError):
            await policy.run(operation)

        assert operation.calls == 2


class TestTransportRetryWithHttpx:
    """Test the decorator against a real httpx client on a mock transport."""

    @pytest.mark.asyncio
    async def test_bails_on_client_error_response(self):
        """A 400 response is requested once."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(400, json={"error": "bad request"})

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as client:

            @transport_retry(**FAST_OVERRIDES)
            async def fetch_items() -> dict:
                response = await client.get("/items")
                response.raise_for_status()
                return response.json()

            with pytest.raises(BailedError) as exc_info:
                await fetch_items()

        assert len(requests) == 1
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_retries_server_error_then_succeeds(self, caplog):
        """503 responses are retried and logged until a 200 arrives."""
        statuses = iter([503, 503, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            status = next(statuses)
            return httpx.Response(status, json={"items": [1, 2]} if status == 200 else {})

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as client:

            @transport_retry(**FAST_OVERRIDES)
            async def fetch_items() -> dict:
                response = await client.get("/items")
                response.raise_for_status()
                return response.json()

            with caplog.at_level(logging.WARNING, logger="managed_retry"):
                result = await fetch_items()

        assert result == {"items": [1, 2]}
        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 2
        assert "fetch_items" in messages[0]
        assert "HTTPStatusError" in messages[0]
