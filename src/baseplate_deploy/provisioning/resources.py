"""
baseplate_deploy.provisioning.resources

Declarations and materialized descriptors for a deployment stack.

Responsibilities:
- Define what a stack declares (job files, policy file, ACME roles).
- Materialize a declaration into descriptors by reading every referenced file up front.
- Define the result handles returned by a provisioning pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from baseplate_deploy.clients.hcl import inline_file_functions
from baseplate_deploy.clients.nomad import Hcl2Options

DEFAULT_ACME_MOUNT = "acme"


# --- Declarations -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JobSource:
    path: Path
    # Prerequisite resources (e.g. CSI volumes) the job should be ordered after.
    # Carried through to the descriptor; nothing sequences on it yet.
    depends_on: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PolicySource:
    name: str
    path: Path


class AcmeRole(BaseModel):
    """Role body for the ACME secrets engine (`<mount>/roles/<name>`)."""

    model_config = ConfigDict(frozen=True)

    account: str
    allowed_domains: str
    allow_subdomains: bool = False
    allow_bare_domains: bool = False


@dataclass(frozen=True, slots=True)
class AcmeRoleSource:
    job: str
    role: AcmeRole
    mount: str = DEFAULT_ACME_MOUNT


@dataclass(frozen=True, slots=True)
class Stack:
    name: str
    jobs: dict[str, JobSource]
    policy: PolicySource | None = None
    roles: tuple[AcmeRoleSource, ...] = ()


# --- Materialized descriptors -----------------------------------------------


@dataclass(frozen=True, slots=True)
class JobDescriptor:
    name: str
    # Job file as written.
    jobspec: str
    # Text sent to Nomad: `jobspec` with `file()` calls inlined when `hcl2.allow_fs`.
    hcl: str
    workdir: Path
    detach: bool = False
    hcl2: Hcl2Options = Hcl2Options(enabled=True, allow_fs=True)
    depends_on: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PolicyDescriptor:
    name: str
    policy: str


@dataclass(frozen=True, slots=True)
class RoleDescriptor:
    path: str
    data_json: str
    disable_read: bool = True
    disable_delete: bool = False


@dataclass(frozen=True, slots=True)
class StackManifest:
    name: str
    jobs: dict[str, JobDescriptor]
    policy: PolicyDescriptor | None = None
    roles: tuple[RoleDescriptor, ...] = ()


# --- Results ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SubmittedJob:
    name: str
    job_id: str
    eval_id: str
    job_modify_index: int
    warnings: str = ""


@dataclass(frozen=True, slots=True)
class ProvisioningResult:
    stack: str
    jobs: dict[str, SubmittedJob] = field(default_factory=dict)
    policy: str | None = None
    roles: tuple[str, ...] = ()
    # Stack job name -> Nomad job id stopped by teardown.
    deregistered: dict[str, str] = field(default_factory=dict)


# --- Materialization --------------------------------------------------------


def role_path(*, mount: str, job: str) -> str:
    return f"{mount.strip('/')}/roles/{job}"


def read_job(name: str, source: JobSource) -> JobDescriptor:
    # The declaration only chooses the file; see Module Notes.
    hcl2 = Hcl2Options(enabled=True, allow_fs=True)
    jobspec = source.path.read_text(encoding="utf-8")
    workdir = source.path.parent
    return JobDescriptor(
        name=name,
        jobspec=jobspec,
        hcl=inline_file_functions(jobspec, workdir=workdir) if hcl2.allow_fs else jobspec,
        workdir=workdir,
        detach=False,
        hcl2=hcl2,
        depends_on=tuple(source.depends_on),
    )


def read_policy(source: PolicySource) -> PolicyDescriptor:
    return PolicyDescriptor(name=source.name, policy=source.path.read_text(encoding="utf-8"))


def build_role(source: AcmeRoleSource) -> RoleDescriptor:
    return RoleDescriptor(
        path=role_path(mount=source.mount, job=source.job),
        data_json=source.role.model_dump_json(),
        disable_read=True,
        disable_delete=False,
    )


def materialize(stack: Stack) -> StackManifest:
    """
    Read every file a stack references and build its descriptors.

    Runs before any network call, so a missing file (including one a job
    pulls in through `file()`) aborts the pass with FileNotFoundError before
    anything is provisioned or torn down.
    """

    jobs = {name: read_job(name, source) for name, source in stack.jobs.items()}
    policy = read_policy(stack.policy) if stack.policy is not None else None
    roles = tuple(build_role(source) for source in stack.roles)
    return StackManifest(name=stack.name, jobs=jobs, policy=policy, roles=roles)


# --- Module Notes -----------------------------------------------------------
# Descriptors are frozen: once materialized, a manifest is applied as-is and
# discarded at the end of the pass.
#
# Every job is submitted the same way: HCL2, `file()` resolved locally, and
# `detach=False` so the pass waits for placement. That holds for fire-and-forget
# workloads such as loadchecker too; a stack that needs a detached submission
# has to grow a field on `JobSource` rather than rely on a per-stack default.
