"""Tests for the HTTP client and retry helper."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from rental_aggregator.utils.http import DEFAULT_USER_AGENT, HttpClient
from rental_aggregator.utils.retry import retry_with_backoff


def make_response(text="<html></html>", status=200):
    response = MagicMock()
    response.text = text
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


class TestHttpClient:
    """Tests for HttpClient."""

    def test_sends_headers_and_timeout(self):
        client = HttpClient(accept_language="nl-NL")
        with patch("rental_aggregator.utils.http.requests.get", return_value=make_response("ok")) as mock_get:
            assert client.get_text("https://example.nl/", timeout=15) == "ok"

        mock_get.assert_called_once_with("https://example.nl/", headers=client.headers, timeout=15)
        assert client.headers["Accept-Language"] == "nl-NL"
        assert client.headers["User-Agent"] == DEFAULT_USER_AGENT

    def test_http_error_raised(self):
        client = HttpClient()
        with patch("rental_aggregator.utils.http.requests.get", return_value=make_response(status=503)):
            with pytest.raises(requests.HTTPError):
                client.get_text("https://example.nl/", timeout=15)

    def test_retries_then_succeeds(self):
        client = HttpClient(backoff_factor=0)
        responses = [requests.ConnectionError("reset"), make_response("ok")]
        with patch("rental_aggregator.utils.http.requests.get", side_effect=responses) as mock_get:
            with patch("rental_aggregator.utils.retry.time.sleep"):
                assert client.get_text("https://example.nl/", timeout=30, retries=2) == "ok"
        assert mock_get.call_count == 2

    def test_fetch_runs_in_thread(self):
        client = HttpClient()
        with patch("rental_aggregator.utils.http.requests.get", return_value=make_response("async")):
            assert asyncio.run(client.fetch("https://example.nl/", timeout=5)) == "async"

    def test_from_config(self):
        client = HttpClient.from_config({"user_agent": "huurbot/1.0"})
        assert client.headers["User-Agent"] == "huurbot/1.0"


class TestRetryWithBackoff:
    """Tests for retry_with_backoff."""

    def test_reraises_after_last_attempt(self):
        calls = []

        @retry_with_backoff(max_retries=2, backoff_factor=0, exceptions=(OSError,))
        def flaky():
            calls.append(1)
            raise OSError("down")

        with patch("rental_aggregator.utils.retry.time.sleep"):
            with pytest.raises(OSError, match="down"):
                flaky()
        assert len(calls) == 3

    def test_zero_retries_single_attempt(self):
        calls = []

        @retry_with_backoff(max_retries=0, exceptions=(OSError,))
        def once():
            calls.append(1)
            raise OSError("down")

        with pytest.raises(OSError):
            once()
        assert len(calls) == 1

    def test_other_exceptions_not_retried(self):
        calls = []

        @retry_with_backoff(max_retries=3, exceptions=(OSError,))
        def broken():
            calls.append(1)
            raise KeyError("x")

        with pytest.raises(KeyError):
            broken()
        assert len(calls) == 1
