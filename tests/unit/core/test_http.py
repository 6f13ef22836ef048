"""Unit tests for the HTTP client.

Tests for retry policy, error mapping and streaming downloads.
"""

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from modctl.core.errors import FilesystemError, NetworkError
from modctl.core.http import USER_AGENT, HttpClient


class _Counter:
    """Handler returning queued responses and counting calls."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class TestGetJson:
    """Tests for HttpClient.get_json."""

    def test_decodes_json(self, make_client: Callable[..., HttpClient]) -> None:
        """A successful response is decoded."""
        client = make_client(_Counter(httpx.Response(200, json={"hits": []})))

        assert client.get_json("https://api.test/search") == {"hits": []}

    def test_sends_user_agent_and_params(self, make_client: Callable[..., HttpClient]) -> None:
        """Requests carry the modctl user agent and query parameters."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        make_client(handler).get_json("https://api.test/search", {"query": "sodium"})

        assert seen[0].headers["User-Agent"] == USER_AGENT
        assert seen[0].url.params["query"] == "sodium"

    def test_retries_server_errors(self, make_client: Callable[..., HttpClient]) -> None:
        """5xx responses are retried until one succeeds."""
        handler = _Counter(httpx.Response(503), httpx.Response(502), httpx.Response(200, json=1))
        client = make_client(handler, retries=3)

        assert client.get_json("https://api.test/x") == 1
        assert handler.calls == 3

    def test_gives_up_after_retries(self, make_client: Callable[..., HttpClient]) -> None:
        """The last error is raised once all attempts fail."""
        handler = _Counter(httpx.Response(500))
        client = make_client(handler, retries=2)

        with pytest.raises(NetworkError) as exc_info:
            client.get_json("https://api.test/x")

        assert exc_info.value.status_code == 500
        assert handler.calls == 2

    def test_does_not_retry_not_found(self, make_client: Callable[..., HttpClient]) -> None:
        """4xx responses fail immediately."""
        handler = _Counter(httpx.Response(404))
        client = make_client(handler, retries=3)

        with pytest.raises(NetworkError) as exc_info:
            client.get_json("https://api.test/x")

        assert exc_info.value.status_code == 404
        assert not exc_info.value.transient
        assert handler.calls == 1

    def test_retries_transport_errors(self, make_client: Callable[..., HttpClient]) -> None:
        """Connection failures are retried."""
        handler = _Counter(httpx.ConnectError("refused"), httpx.Response(200, json=[]))
        client = make_client(handler)

        assert client.get_json("https://api.test/x") == []
        assert handler.calls == 2

    def test_redirect_loop_is_final(self, make_client: Callable[..., HttpClient]) -> None:
        """Endless redirects fail once as a non-transient network error."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(302, headers={"Location": str(request.url)})

        client = make_client(handler, retries=3)

        with pytest.raises(NetworkError) as exc_info:
            client.get_json("https://api.test/loop")

        assert not exc_info.value.transient
        # A single attempt: the request plus the allowed redirects
        assert len(calls) == client._client.max_redirects + 1

    def test_missing_scheme_is_not_retried(self, make_client: Callable[..., HttpClient]) -> None:
        handler = _Counter(httpx.UnsupportedProtocol("Request URL is missing a protocol"))
        client = make_client(handler, retries=3)

        with pytest.raises(NetworkError) as exc_info:
            client.get_json("https://api.test/x")

        assert not exc_info.value.transient
        assert handler.calls == 1

    def test_decoding_error_is_network_failure(
        self, make_client: Callable[..., HttpClient]
    ) -> None:
        handler = _Counter(httpx.DecodingError("bad gzip stream"))

        with pytest.raises(NetworkError, match="bad gzip stream"):
            make_client(handler).get_json("https://api.test/x")

        assert handler.calls == 1

    def test_invalid_url_is_network_failure(self, make_client: Callable[..., HttpClient]) -> None:
        """A URL httpx cannot parse never reaches the transport."""
        handler = _Counter(httpx.Response(200, json={}))

        with pytest.raises(NetworkError):
            make_client(handler).get_text("https://exa\x00mple.com/mod.toml")

        assert handler.calls == 0

    def test_malformed_json(self, make_client: Callable[..., HttpClient]) -> None:
        """A body that is not JSON is a network failure."""
        client = make_client(_Counter(httpx.Response(200, content=b"<html>")))

        with pytest.raises(NetworkError, match="Malformed JSON"):
            client.get_json("https://api.test/x")


class TestGetText:
    """Tests for HttpClient.get_text."""

    def test_returns_body(self, make_client: Callable[..., HttpClient]) -> None:
        """The decoded body is returned."""
        client = make_client(_Counter(httpx.Response(200, text="modLoader = 'fabric'")))

        assert client.get_text("https://raw.test/modctl.toml") == "modLoader = 'fabric'"


class TestDownload:
    """Tests for HttpClient.download."""

    def test_writes_file(self, tmp_path: Path, make_client: Callable[..., HttpClient]) -> None:
        """The body is streamed to the destination."""
        client = make_client(_Counter(httpx.Response(200, content=b"PK\x03\x04abc")))
        dest = tmp_path / "mod.jar"

        written = client.download("https://cdn.test/mod.jar", dest)

        assert written == 7
        assert dest.read_bytes() == b"PK\x03\x04abc"

    def test_failure_removes_file(
        self, tmp_path: Path, make_client: Callable[..., HttpClient]
    ) -> None:
        """No partial file is left after a failed download."""
        client = make_client(_Counter(httpx.Response(403)))
        dest = tmp_path / "mod.jar"

        with pytest.raises(NetworkError):
            client.download("https://cdn.test/mod.jar", dest)

        assert not dest.exists()

    def test_redirect_loop_removes_file(
        self, tmp_path: Path, make_client: Callable[..., HttpClient]
    ) -> None:
        """A download stuck in a redirect loop fails without leaving a file."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        dest = tmp_path / "mod.jar"
        with pytest.raises(NetworkError):
            make_client(handler).download("https://cdn.test/mod.jar", dest)

        assert not dest.exists()

    def test_unwritable_destination(
        self, tmp_path: Path, make_client: Callable[..., HttpClient]
    ) -> None:
        """Write errors are filesystem failures."""
        client = make_client(_Counter(httpx.Response(200, content=b"data")))

        with pytest.raises(FilesystemError):
            client.download("https://cdn.test/mod.jar", tmp_path / "missing" / "mod.jar")
