"""Unit tests for RequestExecutor outcome classification and retry handling.

All HTTP calls are mocked - no real server requests are made.
"""

from unittest.mock import Mock

import httpx
import pytest

from fetcher.exceptions import FetchFailed, RetryRequested
from fetcher.executor import RequestExecutor
from fetcher.models import FetcherConfig
from fetcher.pool import ServerPool
from fetcher.transform import transform_music_units

from helpers import json_response


@pytest.fixture
def pool(config):
    return ServerPool(config.servers)


@pytest.fixture
def executor(pool, config, mock_http_client):
    return RequestExecutor(pool, config, client=mock_http_client)


class TestExecute:
    """Tests for RequestExecutor.execute()."""

    def test_success_returns_parsed_body(self, executor, mock_http_client, fixtures):
        mock_http_client.get.return_value = json_response(fixtures["trending"])

        units = executor.execute("/trending?type=Music", 2, transform_music_units)

        assert len(units) == 4
        assert units[0].duration == "4:31"
        mock_http_client.get.assert_called_once_with(
            "https://mirror-a.example/api/v1/trending?type=Music", timeout=5.0
        )

    def test_undecodable_body_fails_without_rotation(self, executor, pool, mock_http_client):
        mock_http_client.get.return_value = httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(FetchFailed) as exc_info:
            executor.execute("/trending", 2, transform_music_units)

        assert exc_info.value.url == "https://mirror-a.example/api/v1/trending"
        assert pool.active_index == 0
        assert mock_http_client.get.call_count == 1

    def test_wrong_shape_fails(self, executor, mock_http_client, fixtures):
        mock_http_client.get.return_value = json_response(fixtures["error"], status_code=500)

        with pytest.raises(FetchFailed, match="invalid response body"):
            executor.execute("/trending", 2, transform_music_units)

    def test_transport_error_with_budget_rotates_and_signals_retry(
        self, executor, pool, mock_http_client
    ):
        mock_http_client.get.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(RetryRequested) as exc_info:
            executor.execute("/trending", 2, transform_music_units)

        assert exc_info.value.server == "https://mirror-a.example/api/v1"
        assert exc_info.value.remaining == 1
        assert pool.active_index == 1
        assert mock_http_client.get.call_count == 1

    def test_timeout_is_retryable(self, executor, pool, mock_http_client):
        mock_http_client.get.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(RetryRequested):
            executor.execute("/search?q=x", 1, transform_music_units)

        assert pool.active_index == 1

    def test_transport_error_without_budget_fails(self, executor, pool, mock_http_client):
        mock_http_client.get.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(FetchFailed) as exc_info:
            executor.execute("/trending", 0, transform_music_units)

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert pool.active_index == 0

    def test_content_decoding_error_is_terminal(self, executor, pool, mock_http_client):
        mock_http_client.get.side_effect = httpx.DecodingError("bad gzip stream")

        with pytest.raises(FetchFailed, match="decoding error"):
            executor.execute("/trending", 2, transform_music_units)

        assert pool.active_index == 0

    def test_targets_rotated_server(self, executor, pool, mock_http_client):
        pool.rotate()
        mock_http_client.get.return_value = json_response([])

        executor.execute("/trending", 0, transform_music_units)

        mock_http_client.get.assert_called_once_with(
            "https://mirror-b.example/api/v1/trending", timeout=5.0
        )


class TestExecuteWithRetries:
    """Tests for RequestExecutor.execute_with_retries()."""

    def test_budget_two_all_failing(self, executor, pool, mock_http_client):
        mock_http_client.get.side_effect = httpx.ConnectError("down")
        rotate = Mock(wraps=pool.rotate)
        pool.rotate = rotate

        with pytest.raises(FetchFailed):
            executor.execute_with_retries("/trending", 2, transform_music_units)

        assert rotate.call_count == 2
        assert mock_http_client.get.call_count == 3
        called_urls = [call.args[0] for call in mock_http_client.get.call_args_list]
        assert called_urls == [
            "https://mirror-a.example/api/v1/trending",
            "https://mirror-b.example/api/v1/trending",
            "https://mirror-c.example/api/v1/trending",
        ]

    def test_returns_first_success(self, executor, pool, mock_http_client, fixtures):
        mock_http_client.get.side_effect = [
            httpx.ConnectError("down"),
            json_response(fixtures["search_page_1"]),
        ]

        units = executor.execute_with_retries("/search?q=chill", 2, transform_music_units)

        assert [u.name for u in units] == ["Chill Mix Vol. 1", "Cool Evening"]
        assert pool.active_index == 1

    def test_decode_failure_not_retried(self, executor, mock_http_client):
        mock_http_client.get.return_value = httpx.Response(200, text="not json")

        with pytest.raises(FetchFailed):
            executor.execute_with_retries("/trending", 5, transform_music_units)

        assert mock_http_client.get.call_count == 1


class TestClientLifecycle:
    """Tests for client construction and close()."""

    def test_default_client_headers_and_timeout(self, pool):
        config = FetcherConfig(servers=["https://a.example"], timeout=3.0, user_agent="ua/1")
        executor = RequestExecutor(pool, config)

        try:
            assert executor.client.headers["User-Agent"] == "ua/1"
            assert executor.client.headers["Accept-Encoding"] == "gzip"
            assert executor.client.timeout.read == 3.0
            assert executor.client.timeout.connect == 3.0
        finally:
            executor.close()

    def test_gzip_disabled(self, pool):
        config = FetcherConfig(servers=["https://a.example"], gzip=False)
        executor = RequestExecutor(pool, config)

        try:
            assert executor.client.headers["Accept-Encoding"] == "identity"
        finally:
            executor.close()

    def test_close_owned_client(self, pool, config, mocker):
        mock_client = mocker.MagicMock(spec=httpx.Client)
        mocker.patch("httpx.Client", return_value=mock_client)

        executor = RequestExecutor(pool, config)
        executor.close()

        mock_client.close.assert_called_once()

    def test_injected_client_left_open(self, executor, mock_http_client):
        executor.close()

        mock_http_client.close.assert_not_called()
