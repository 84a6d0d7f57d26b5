"""
baseplate_deploy.clients.vault

HTTP client boundary for Vault.

Responsibilities:
- Register and delete ACL policies (`sys/policies/acl`).
- Write, optionally read back, and delete generic endpoints (e.g. secrets-engine roles).
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from baseplate_deploy.settings import Settings


def create_http(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.vault_addr,
        timeout=settings.http_timeout_seconds,
    )


class VaultClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._settings.vault_token:
            headers["X-Vault-Token"] = self._settings.vault_token
        if self._settings.vault_namespace:
            headers["X-Vault-Namespace"] = self._settings.vault_namespace
        return headers

    async def register_policy(self, *, name: str, policy: str) -> None:
        r = await self._http.put(
            f"/v1/sys/policies/acl/{quote(name, safe='')}",
            headers=self._headers(),
            json={"policy": policy},
        )
        r.raise_for_status()

    async def delete_policy(self, name: str) -> None:
        r = await self._http.delete(
            f"/v1/sys/policies/acl/{quote(name, safe='')}",
            headers=self._headers(),
        )
        r.raise_for_status()

    async def write_endpoint(
        self,
        *,
        path: str,
        data_json: str,
        disable_read: bool,
        disable_delete: bool,
    ) -> dict[str, Any] | None:
        """
        Write `data_json` (already serialized) to `path`.

        Returns the endpoint's data as read back after the write, or None when
        `disable_read` is set. `disable_delete` only affects `delete_endpoint`.
        """

        r = await self._http.put(
            self._endpoint_url(path),
            headers={**self._headers(), "Content-Type": "application/json"},
            content=data_json.encode("utf-8"),
        )
        r.raise_for_status()

        if disable_read:
            return None
        return await self.read_endpoint(path)

    async def read_endpoint(self, path: str) -> dict[str, Any]:
        r = await self._http.get(self._endpoint_url(path), headers=self._headers())
        r.raise_for_status()
        return dict(r.json().get("data") or {})

    async def delete_endpoint(self, *, path: str, disable_delete: bool) -> bool:
        # Returns whether a delete request was issued.
        if disable_delete:
            return False
        r = await self._http.delete(self._endpoint_url(path), headers=self._headers())
        r.raise_for_status()
        return True

    @staticmethod
    def _endpoint_url(path: str) -> str:
        return "/v1/" + quote(path.strip("/"), safe="/")


# --- Module Notes -----------------------------------------------------------
# Write responses are not inspected: role writes on secrets engines typically
# answer 204 with an empty body.
