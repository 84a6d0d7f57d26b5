"""
baseplate_deploy.provisioning.registrants

Registrants apply materialized descriptors to Nomad and Vault.

Responsibilities:
- Submit jobs and collect the submitted-job handles by name.
- Register the stack's ACL policy.
- Write ACME role endpoints.
- Undo each of the above for teardown.

Failures are logged with the resource name bound and re-raised unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from baseplate_deploy.clients.nomad import NomadClient
from baseplate_deploy.clients.vault import VaultClient
from baseplate_deploy.observability.logging import get_logger
from baseplate_deploy.provisioning.resources import (
    JobDescriptor,
    PolicyDescriptor,
    RoleDescriptor,
    SubmittedJob,
)

log = get_logger(__name__)


async def register_jobs(
    jobs: Mapping[str, JobDescriptor], *, nomad: NomadClient
) -> dict[str, SubmittedJob]:
    submitted: dict[str, SubmittedJob] = {}
    for name, job in jobs.items():
        bound = log.bind(job=name)
        bound.info("job.submit", detach=job.detach, depends_on=list(job.depends_on))
        try:
            registration = await nomad.submit_job(
                name=name,
                jobspec=job.hcl,
                detach=job.detach,
                hcl2=job.hcl2,
            )
        except Exception:
            bound.exception("job.submit_failed")
            raise
        submitted[name] = SubmittedJob(
            name=name,
            job_id=registration.job_id,
            eval_id=registration.eval_id,
            job_modify_index=registration.job_modify_index,
            warnings=registration.warnings,
        )
    return submitted


async def register_policy(policy: PolicyDescriptor, *, vault: VaultClient) -> str:
    bound = log.bind(policy=policy.name)
    try:
        await vault.register_policy(name=policy.name, policy=policy.policy)
    except Exception:
        bound.exception("policy.register_failed")
        raise
    bound.info("policy.registered")
    return policy.name


async def register_roles(roles: Iterable[RoleDescriptor], *, vault: VaultClient) -> tuple[str, ...]:
    written: list[str] = []
    for role in roles:
        bound = log.bind(path=role.path)
        try:
            await vault.write_endpoint(
                path=role.path,
                data_json=role.data_json,
                disable_read=role.disable_read,
                disable_delete=role.disable_delete,
            )
        except Exception:
            bound.exception("role.write_failed")
            raise
        bound.info("role.written")
        written.append(role.path)
    return tuple(written)


async def deregister_jobs(
    jobs: Mapping[str, JobDescriptor], *, nomad: NomadClient
) -> dict[str, str]:
    # The job id comes from the spec itself, so parse it again to find what to stop.
    removed: dict[str, str] = {}
    for name, job in jobs.items():
        bound = log.bind(job=name)
        try:
            parsed = await nomad.parse_job(jobspec=job.hcl, hcl2=job.hcl2)
            job_id = str(parsed.get("ID", ""))
            await nomad.deregister_job(job_id)
        except Exception:
            bound.exception("job.deregister_failed")
            raise
        bound.info("job.deregistered", job_id=job_id)
        removed[name] = job_id
    return removed


async def delete_policy(policy: PolicyDescriptor, *, vault: VaultClient) -> str:
    bound = log.bind(policy=policy.name)
    try:
        await vault.delete_policy(policy.name)
    except Exception:
        bound.exception("policy.delete_failed")
        raise
    bound.info("policy.deleted")
    return policy.name


async def delete_roles(roles: Iterable[RoleDescriptor], *, vault: VaultClient) -> tuple[str, ...]:
    deleted: list[str] = []
    for role in roles:
        bound = log.bind(path=role.path)
        try:
            issued = await vault.delete_endpoint(path=role.path, disable_delete=role.disable_delete)
        except Exception:
            bound.exception("role.delete_failed")
            raise
        if not issued:
            bound.info("role.delete_skipped")
            continue
        bound.info("role.deleted")
        deleted.append(role.path)
    return tuple(deleted)
