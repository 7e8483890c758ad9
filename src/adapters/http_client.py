"""httpx wrapper.

Why a wrapper:
- Applies one base URL and one header set to every call.
- Serializes JSON and multipart bodies the same way for every API.
- Easy to test: pass an `httpx.Client` built on `httpx.MockTransport`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from core.config import AppSettings


@dataclass
class FormData:
    """Multipart body: plain fields plus optional files."""

    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, Any] = field(default_factory=dict)


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with the app's timeout and User-Agent."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
    )


class Request:
    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        """
        :param url: base URL prepended to every path
        :param headers: headers sent with every request of this client
        :param client: transport to use; defaults to `build_client()`
        """
        self._base_url = url
        self._headers = dict(headers or {})
        self._client = client or build_client()

    def get(self, path: str, body: Any = None) -> httpx.Response:
        return self.request("GET", path, body)

    def post(self, path: str, body: Any = None) -> httpx.Response:
        return self.request("POST", path, body)

    def put(self, path: str, body: Any = None) -> httpx.Response:
        return self.request("PUT", path, body)

    def options(self, path: str, body: Any = None) -> httpx.Response:
        return self.request("OPTIONS", path, body)

    def patch(self, path: str, body: Any = None) -> httpx.Response:
        return self.request("PATCH", path, body)

    def delete(self, path: str) -> httpx.Response:
        return self.request("DELETE", path)

    def request(self, method: str, path: str, body: Any = None) -> httpx.Response:
        url = f"{self._base_url}{path}"
        headers = dict(self._headers)

        if isinstance(body, FormData):
            return self._client.request(
                method,
                url,
                headers=headers,
                data=body.fields,
                files=body.files or None,
            )
        if body:
            headers["content-type"] = "application/json"
            return self._client.request(method, url, headers=headers, content=json.dumps(body))
        return self._client.request(method, url, headers=headers)

    def close(self) -> None:
        self._client.close()
