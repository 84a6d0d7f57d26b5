"""
baseplate_deploy.clients.nomad

HTTP client boundary for the Nomad job orchestrator.

Responsibilities:
- Parse HCL job specs into canonical job JSON (`/v1/jobs/parse`).
- Register and deregister jobs.
- Follow evaluations/deployments with blocking queries when a submission is not detached.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from baseplate_deploy.observability.logging import get_logger
from baseplate_deploy.settings import Settings

log = get_logger(__name__)

EVAL_FAILED_STATUSES = frozenset({"failed", "canceled"})
DEPLOYMENT_TERMINAL_STATUSES = frozenset({"successful", "failed", "cancelled"})


@dataclass(frozen=True, slots=True)
class Hcl2Options:
    enabled: bool = True
    # Nomad parses with filesystem functions disabled, so `file()` calls are
    # inlined before submission (clients.hcl) when this is set.
    allow_fs: bool = False


@dataclass(frozen=True, slots=True)
class JobRegistration:
    job_id: str
    eval_id: str
    job_modify_index: int
    warnings: str = ""


def create_http(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.nomad_addr,
        timeout=settings.http_timeout_seconds,
    )


class NomadClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    def _headers(self) -> dict[str, str]:
        if not self._settings.nomad_token:
            return {}
        return {"X-Nomad-Token": self._settings.nomad_token}

    async def parse_job(
        self,
        *,
        jobspec: str,
        hcl2: Hcl2Options,
    ) -> dict[str, Any]:
        r = await self._http.post(
            "/v1/jobs/parse",
            headers=self._headers(),
            json={"JobHCL": jobspec, "Canonicalize": True, "HCLv1": not hcl2.enabled},
        )
        r.raise_for_status()
        return r.json()

    async def register_job(self, job: dict[str, Any]) -> JobRegistration:
        r = await self._http.post("/v1/jobs", headers=self._headers(), json={"Job": job})
        r.raise_for_status()
        body = r.json()
        return JobRegistration(
            job_id=str(job.get("ID", "")),
            eval_id=str(body.get("EvalID") or ""),
            job_modify_index=int(body.get("JobModifyIndex") or 0),
            warnings=str(body.get("Warnings") or ""),
        )

    async def submit_job(
        self,
        *,
        name: str,
        jobspec: str,
        detach: bool,
        hcl2: Hcl2Options,
    ) -> JobRegistration:
        job = await self.parse_job(jobspec=jobspec, hcl2=hcl2)
        registration = await self.register_job(job)
        log.info(
            "nomad.job.registered",
            name=name,
            job_id=registration.job_id,
            eval_id=registration.eval_id,
            job_modify_index=registration.job_modify_index,
        )
        if registration.warnings:
            log.warning("nomad.job.warnings", name=name, warnings=registration.warnings)

        # Periodic/parameterized jobs do not create an evaluation on register.
        if not detach and registration.eval_id:
            await self.wait_for_placement(name=name, eval_id=registration.eval_id)
        return registration

    async def wait_for_placement(self, *, name: str, eval_id: str) -> None:
        evaluation = await self.wait_for_evaluation(eval_id)
        status = str(evaluation.get("Status", ""))
        if status in EVAL_FAILED_STATUSES:
            raise RuntimeError(
                f"evaluation {eval_id} for job {name!r} ended with status {status!r}: "
                f"{evaluation.get('StatusDescription', '')}"
            )
        if evaluation.get("FailedTGAllocs"):
            log.warning(
                "nomad.evaluation.placement_failures",
                name=name,
                eval_id=eval_id,
                task_groups=sorted(evaluation["FailedTGAllocs"]),
            )

        deployment_id = str(evaluation.get("DeploymentID") or "")
        if not deployment_id:
            return
        deployment = await self.wait_for_deployment(deployment_id)
        status = str(deployment.get("Status", ""))
        if status != "successful":
            raise RuntimeError(
                f"deployment {deployment_id} for job {name!r} ended with status {status!r}: "
                f"{deployment.get('StatusDescription', '')}"
            )
        log.info("nomad.deployment.successful", name=name, deployment_id=deployment_id)

    async def wait_for_evaluation(self, eval_id: str) -> dict[str, Any]:
        return await self._follow(
            f"/v1/evaluation/{quote(eval_id, safe='')}",
            until=lambda body: str(body.get("Status", "")) != "pending",
        )

    async def wait_for_deployment(self, deployment_id: str) -> dict[str, Any]:
        return await self._follow(
            f"/v1/deployment/{quote(deployment_id, safe='')}",
            until=lambda body: str(body.get("Status", "")) in DEPLOYMENT_TERMINAL_STATUSES,
        )

    async def deregister_job(self, job_id: str, *, purge: bool = False) -> dict[str, Any]:
        r = await self._http.delete(
            f"/v1/job/{quote(job_id, safe='')}",
            headers=self._headers(),
            params={"purge": str(purge).lower()},
        )
        r.raise_for_status()
        return r.json()

    async def _follow(
        self,
        path: str,
        *,
        until: Callable[[dict[str, Any]], bool],
    ) -> dict[str, Any]:
        # Blocking queries: Nomad holds the request until the index moves past ours
        # or the wait elapses, so this loop does not spin.
        index = 0
        while True:
            r = await self._http.get(
                path,
                headers=self._headers(),
                params={"index": index, "wait": self._settings.nomad_wait},
            )
            r.raise_for_status()
            body = r.json()
            if until(body):
                return body
            index = int(r.headers.get("X-Nomad-Index") or index)


# --- Module Notes -----------------------------------------------------------
# This mirrors what `nomad job run` does without `-detach`: register, then
# monitor the evaluation and any deployment it starts.
