"""HTTP client used for registry queries, downloads and the release feed.

Wraps a single ``httpx.Client`` with a per-request timeout and a
``tenacity`` retry policy. Transport errors, timeouts, 429 and 5xx
responses are retried with exponential backoff; other 4xx responses and
malformed bodies fail immediately. Every failure surfaces as
:class:`~modctl.core.errors.NetworkError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from modctl import __version__
from modctl.core.config import DEFAULT_RETRIES, DEFAULT_TIMEOUT_SECONDS
from modctl.core.errors import FilesystemError, NetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = f"modctl/{__version__}"

# Responses worth retrying; everything else in 4xx is final
RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})

CHUNK_SIZE = 64 * 1024


def _is_transient(exc: BaseException) -> bool:
    """Retry predicate: only transient network failures are retried."""
    return isinstance(exc, NetworkError) and exc.transient


def _network_error(what: str, exc: Exception) -> NetworkError:
    """Map an httpx exception to a NetworkError.

    Timeouts and transport errors are transient, except a missing or
    unknown URL scheme. Redirect loops, decoding errors and invalid URLs
    are final.
    """
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(f"{what} timed out", transient=True)
    if isinstance(exc, httpx.UnsupportedProtocol):
        return NetworkError(f"{what} failed: {exc}")
    if isinstance(exc, httpx.TransportError):
        return NetworkError(f"{what} failed: {exc}", transient=True)
    return NetworkError(f"{what} failed: {exc}")


def _raise_for_status(response: httpx.Response) -> None:
    """Convert a non-success response into a NetworkError."""
    if response.is_success:
        return
    status = response.status_code
    raise NetworkError(
        f"HTTP {status} for {response.request.url}",
        status_code=status,
        transient=status in RETRYABLE_STATUS_CODES,
    )


class HttpClient:
    """Blocking HTTP client with timeout and retry policy.

    Example:
        >>> with HttpClient(timeout=10.0, retries=3) as client:
        ...     hits = client.get_json("https://api.modrinth.com/v2/search", {"query": "sodium"})
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retries: int = DEFAULT_RETRIES,
        backoff: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout: Timeout in seconds applied to each request.
            retries: Total attempts per call (1 disables retrying).
            backoff: Multiplier for the exponential wait between attempts.
            transport: Optional transport, used by tests to mock responses.
        """
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )
        self._retries = retries
        self._backoff = backoff

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _with_retry(self, func: Callable[[], T], description: str) -> T:
        """Run ``func`` under the retry policy."""
        retrying = Retrying(
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=self._backoff, max=10),
            retry=retry_if_exception(_is_transient),
            before_sleep=lambda state: logger.debug(
                "Retrying %s (attempt %d failed: %s)",
                description,
                state.attempt_number,
                state.outcome.exception() if state.outcome else None,
            ),
            reraise=True,
        )
        return retrying(func)

    def _get(self, url: str, params: dict[str, str] | None) -> httpx.Response:
        """Issue a GET and map transport errors."""
        try:
            response = self._client.get(url, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise _network_error(f"Request to {url}", e) from e
        _raise_for_status(response)
        return response

    def get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET a URL and decode the JSON body.

        Args:
            url: Absolute URL.
            params: Optional query parameters.

        Returns:
            Decoded JSON value.

        Raises:
            NetworkError: On transport failure, error status or invalid JSON.
        """

        def attempt() -> Any:
            response = self._get(url, params)
            try:
                return response.json()
            except ValueError as e:
                raise NetworkError(f"Malformed JSON response from {url}: {e}") from e

        return self._with_retry(attempt, f"GET {url}")

    def get_text(self, url: str) -> str:
        """GET a URL and return the body as text.

        Raises:
            NetworkError: On transport failure or error status.
        """
        return self._with_retry(lambda: self._get(url, None).text, f"GET {url}")

    def download(self, url: str, dest: Path) -> int:
        """Stream a URL into ``dest``.

        The file is written only by this call; on any failure it is removed
        so no partial file is left behind.

        Args:
            url: Absolute download URL.
            dest: File to write.

        Returns:
            Number of bytes written.

        Raises:
            NetworkError: On transport failure or error status.
            FilesystemError: If the file cannot be written.
        """

        def attempt() -> int:
            written = 0
            try:
                with self._client.stream("GET", url) as response:
                    _raise_for_status(response)
                    with open(dest, "wb") as f:
                        for chunk in response.iter_bytes(CHUNK_SIZE):
                            f.write(chunk)
                            written += len(chunk)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise _network_error(f"Download of {url}", e) from e
            except OSError as e:
                raise FilesystemError(f"Cannot write {dest}: {e}") from e
            return written

        try:
            written = self._with_retry(attempt, f"download {url}")
        except BaseException:
            dest.unlink(missing_ok=True)
            raise
        logger.debug("Downloaded %s (%d bytes) to %s", url, written, dest)
        return written
