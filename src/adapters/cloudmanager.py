"""Cloud Manager REST API (read-only subset used by `setup`).

Each list call inspects the status code first. Anything but 200, or a body
that is not the expected JSON shape, is reported through the `warning` hook
and returns None: callers treat None as "no data, already reported".
"""

from __future__ import annotations

from typing import Callable

import httpx

from adapters.http_client import Request
from core.domain.models import Environment, Program, Site

CLOUD_MANAGER_URL = "https://cloudmanager.adobe.io"
CLOUD_MANAGER_STAGE_URL = "https://cloudmanager-stage.adobe.io"


def get_base_url(stage: bool = False) -> str:
    return CLOUD_MANAGER_STAGE_URL if stage else CLOUD_MANAGER_URL


class CloudManager:
    def __init__(
        self,
        cloud_manager_url: str,
        api_key: str,
        org_id: str,
        access_token: str,
        *,
        client: httpx.Client | None = None,
        warning: Callable[[str], None] | None = None,
    ) -> None:
        """
        :param cloud_manager_url: API base URL, e.g. `https://cloudmanager.adobe.io/api`
        :param api_key: IMS client id sent as `x-api-key`
        :param org_id: IMS org sent as `x-gw-ims-org-id`
        :param access_token: bearer token
        """
        headers = {
            "x-api-key": api_key,
            "x-gw-ims-org-id": org_id,
            "Authorization": f"Bearer {access_token}",
            "accept": "application/json",
        }
        self._client = Request(cloud_manager_url, headers, client=client)
        self._warning = warning

    def list_programs(self) -> list[Program] | None:
        response = self._client.get("/programs")
        if response.status_code != 200:
            self._warn(f"Failed to list programs: {response.status_code} {response.reason_phrase}")
            return None

        programs = self._items(response, "programs", "_embedded", "programs", key="id")
        if programs is None:
            return None
        return [Program(id=p["id"], name=p.get("name")) for p in programs]

    def list_environments(self, program_id: str | None) -> list[Environment] | None:
        if not program_id:
            return None
        response = self._client.get(f"/program/{program_id}/environments")
        if response.status_code != 200:
            self._warn(f"Failed to list environments: {response.status_code} {response.reason_phrase}")
            return None

        environments = self._items(response, "environments", "_embedded", "environments", key="id")
        if environments is None:
            return None
        return [
            Environment(
                id=env["id"],
                name=env.get("name"),
                type=env.get("type"),
                status=env.get("status"),
            )
            for env in environments
        ]

    def list_sites(self, program_id: str | None) -> list[Site] | None:
        if not program_id:
            return None
        response = self._client.get(f"/program/{program_id}/domain-mappings")
        if response.status_code != 200:
            self._warn(f"Failed to list sites: {response.status_code} {response.reason_phrase}")
            return None

        mappings = self._items(response, "sites", "domainMappings", key="domainMappingId")
        if mappings is None:
            return None
        return [Site(id=m["domainMappingId"], name=m.get("domainName")) for m in mappings]

    def close(self) -> None:
        self._client.close()

    def _items(self, response: httpx.Response, what: str, *path: str, key: str) -> list[dict] | None:
        """List at `path` in the JSON body, or None (after a warning) when the body has another shape.

        A missing or null container reads as an empty list. Records without `key` are skipped.
        """

        try:
            node = response.json()
        except ValueError:
            self._warn(f"Failed to list {what}: response is not JSON")
            return None

        for name in path:
            if not isinstance(node, dict):
                self._warn(f"Failed to list {what}: unexpected response shape")
                return None
            node = node.get(name)
            if node is None:
                return []

        if not isinstance(node, list):
            self._warn(f"Failed to list {what}: unexpected response shape")
            return None
        return [item for item in node if isinstance(item, dict) and item.get(key) is not None]

    def _warn(self, message: str) -> None:
        if self._warning is not None:
            self._warning(message)
