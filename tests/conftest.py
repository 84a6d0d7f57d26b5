"""
tests.conftest

In-memory stand-ins for the Nomad and Vault HTTP APIs.

Both fakes record every request into a shared call log so tests can assert on
what was sent, and in which order, without a cluster.
"""

from __future__ import annotations

import json
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from baseplate_deploy.clients.nomad import NomadClient
from baseplate_deploy.clients.vault import VaultClient
from baseplate_deploy.services.provisioning_service import ProvisioningService
from baseplate_deploy.settings import Settings

NOMAD_URL = "http://nomad.test"
VAULT_URL = "http://vault.test"

_JOB_ID = re.compile(r'job\s+"([^"]+)"')


@dataclass
class Call:
    system: str
    method: str
    path: str
    params: dict[str, str]
    headers: dict[str, str]
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class FakeNomad:
    calls: list[Call]
    eval_statuses: list[str] = field(default_factory=lambda: ["complete"])
    deployment_id: str = ""
    deployment_status: str = "successful"
    eval_id: str = "eval-1"
    parse_status: int = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        call = _record(self.calls, "nomad", request)
        if call.method == "POST" and call.path == "/v1/jobs/parse":
            if self.parse_status != 200:
                return httpx.Response(self.parse_status, text="parse error")
            hcl = call.json()["JobHCL"]
            match = _JOB_ID.search(hcl)
            job_id = match.group(1) if match else ""
            return httpx.Response(200, json={"ID": job_id, "Name": job_id, "Type": "service"})
        if call.method == "POST" and call.path == "/v1/jobs":
            return httpx.Response(
                200,
                json={"EvalID": self.eval_id, "JobModifyIndex": 7, "Warnings": "", "Index": 7},
            )
        if call.method == "GET" and call.path == f"/v1/evaluation/{self.eval_id}":
            status = self.eval_statuses.pop(0) if len(self.eval_statuses) > 1 else self.eval_statuses[0]
            return httpx.Response(
                200,
                headers={"X-Nomad-Index": str(10 + len(self.calls))},
                json={
                    "ID": self.eval_id,
                    "Status": status,
                    "StatusDescription": "",
                    "DeploymentID": self.deployment_id,
                },
            )
        if call.method == "GET" and call.path == f"/v1/deployment/{self.deployment_id}":
            return httpx.Response(
                200,
                headers={"X-Nomad-Index": "20"},
                json={"ID": self.deployment_id, "Status": self.deployment_status},
            )
        if call.method == "DELETE" and call.path.startswith("/v1/job/"):
            return httpx.Response(200, json={"EvalID": "eval-stop"})
        return httpx.Response(404, text="not found")


@dataclass
class FakeVault:
    calls: list[Call]
    data: dict[str, Any] = field(default_factory=dict)

    def handler(self, request: httpx.Request) -> httpx.Response:
        call = _record(self.calls, "vault", request)
        if call.method == "PUT":
            self.data[call.path] = call.json()
            return httpx.Response(204)
        if call.method == "GET":
            if call.path not in self.data:
                return httpx.Response(404, json={"errors": []})
            return httpx.Response(200, json={"data": self.data[call.path]})
        if call.method == "DELETE":
            self.data.pop(call.path, None)
            return httpx.Response(204)
        return httpx.Response(405)


def _record(calls: list[Call], system: str, request: httpx.Request) -> Call:
    call = Call(
        system=system,
        method=request.method,
        path=request.url.path,
        params=dict(request.url.params),
        headers=dict(request.headers),
        body=request.content,
    )
    calls.append(call)
    return call


@pytest.fixture
def settings() -> Settings:
    return Settings(
        env="test",
        nomad_addr=NOMAD_URL,
        nomad_token="nomad-secret",
        vault_addr=VAULT_URL,
        vault_token="vault-secret",
        vault_namespace="",
    )


@pytest.fixture
def calls() -> list[Call]:
    return []


@pytest.fixture
def fake_nomad(calls: list[Call]) -> FakeNomad:
    return FakeNomad(calls=calls)


@pytest.fixture
def fake_vault(calls: list[Call]) -> FakeVault:
    return FakeVault(calls=calls)


@asynccontextmanager
async def nomad_client(settings: Settings, fake: FakeNomad) -> AsyncIterator[NomadClient]:
    async with httpx.AsyncClient(
        base_url=settings.nomad_addr, transport=httpx.MockTransport(fake.handler)
    ) as http:
        yield NomadClient(settings=settings, http=http)


@asynccontextmanager
async def vault_client(settings: Settings, fake: FakeVault) -> AsyncIterator[VaultClient]:
    async with httpx.AsyncClient(
        base_url=settings.vault_addr, transport=httpx.MockTransport(fake.handler)
    ) as http:
        yield VaultClient(settings=settings, http=http)


@asynccontextmanager
async def provisioning_service(
    settings: Settings, nomad: FakeNomad, vault: FakeVault
) -> AsyncIterator[ProvisioningService]:
    async with nomad_client(settings, nomad) as n, vault_client(settings, vault) as v:
        yield ProvisioningService(nomad=n, vault=v)
