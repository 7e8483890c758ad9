"""Adobe IMS: stored contexts and the organizations endpoint.

Contexts are the ones written by `aio login` / `aio context set` into the
shared `aio` config:

- `ims.config.current`      name of the default context
- `ims.contexts.<name>`     credential data (client_id, env, access_token, ...)

Token exchange and refresh stay with the Adobe I/O CLI; this module only
reads the cached access token.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx
import jwt

from adapters.http_client import Request
from core.config_store import ConfigStore
from core.errors import IdentityError, TokenUnavailableError

IMS_URL = "https://ims-na1.adobelogin.com"
IMS_STAGE_URL = "https://ims-na1-stg1.adobelogin.com"


@dataclass
class ContextData:
    name: str
    data: dict[str, Any] | None
    local: bool = False


def decode_token(token: str | None) -> dict[str, Any] | None:
    """Decode a JWT access token without verifying it; None if not a JWT."""

    if not token:
        return None
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    return claims if isinstance(claims, dict) else None


def is_stage_token(token: str) -> bool:
    claims = decode_token(token) or {}
    return "stg" in str(claims.get("as", ""))


class ImsContexts:
    """Read access to the IMS contexts stored in the `aio` config."""

    def __init__(self, store: ConfigStore) -> None:
        self._store = store

    def get_current(self) -> str | None:
        current = self._store.get("ims.config.current")
        return current if isinstance(current, str) and current else None

    def get(self, name: str) -> ContextData:
        key = f"ims.contexts.{name}"
        data = self._store.get(key)
        local = self._store.get(key, source="local") is not None
        return ContextData(name=name, data=data if isinstance(data, dict) else None, local=local)

    def get_token(self, name: str) -> str:
        """Cached access token of context `name`."""

        data = self.get(name).data or {}
        access_token = data.get("access_token")
        if isinstance(access_token, str) and access_token:
            return access_token
        if not isinstance(access_token, dict) or not access_token.get("token"):
            raise TokenUnavailableError(
                f"No access token stored for context '{name}'. Please run `aio login` first."
            )

        expiry = access_token.get("expiry")
        if isinstance(expiry, (int, float)) and expiry <= time.time() * 1000:
            raise TokenUnavailableError(
                f"The access token of context '{name}' has expired. Please run `aio login` again."
            )
        return str(access_token["token"])


def list_organizations(access_token: str, *, client: httpx.Client | None = None) -> list[dict[str, Any]]:
    """Organizations visible to the token owner (raw IMS records).

    Raises `httpx.HTTPStatusError` on a non-2xx answer and `IdentityError`
    when the body is not a JSON list.
    """

    host = IMS_STAGE_URL if is_stage_token(access_token) else IMS_URL
    request = Request(
        host,
        {"Authorization": f"Bearer {access_token}", "accept": "application/json"},
        client=client,
    )
    try:
        response = request.get("/ims/organizations/v6")
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as exc:
            raise IdentityError("IMS returned an organizations response that is not JSON.") from exc
    finally:
        request.close()

    if not isinstance(data, list):
        raise IdentityError("IMS returned an organizations response that is not a list.")
    return [org for org in data if isinstance(org, dict)]
