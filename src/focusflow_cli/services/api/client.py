"""HTTP client for the FocusFlow server API."""

import time
from typing import Any

import httpx

SESSION_COOKIE_NAME = "connect.sid"


class APIClient:
    """HTTP client for the FocusFlow API, authenticated by session cookie."""

    def __init__(
        self,
        base_url: str,
        *,
        session_cookie: str | None = None,
        timeout: float = 10.0,
        retry: int = 2,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session_cookie = session_cookie
        self.timeout = timeout
        self.retry = retry
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            cookies = {}
            if self.session_cookie:
                cookies[SESSION_COOKIE_NAME] = self.session_cookie
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                headers=self._get_headers(),
                cookies=cookies,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry: int | None = None,
    ) -> httpx.Response:
        """Make an HTTP request to the API."""
        if retry is None:
            retry = self.retry

        client = self._get_client()
        url = path if path.startswith("/") else f"/{path}"

        last_exception: Exception | None = None
        for attempt in range(retry + 1):
            try:
                response = client.request(method=method, url=url, json=json, params=params)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                # Don't retry client errors (4xx)
                if 400 <= e.response.status_code < 500:
                    raise
                last_exception = e
            except httpx.RequestError as e:
                last_exception = e

            if attempt < retry:
                # Simple exponential backoff
                time.sleep(0.5 * 2**attempt)

        if last_exception:
            raise last_exception
        raise RuntimeError("Request failed after all retries")

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        """Make a GET request."""
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: dict[str, Any] | None = None) -> httpx.Response:
        """Make a POST request."""
        return self.request("POST", path, json=json)
