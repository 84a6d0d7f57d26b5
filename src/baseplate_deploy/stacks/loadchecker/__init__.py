"""
baseplate_deploy.stacks.loadchecker

Deployment of the `loadchecker` service: one Nomad job and its Vault policy.
"""

from __future__ import annotations

from pathlib import Path

from baseplate_deploy.provisioning.resources import DEFAULT_ACME_MOUNT, JobSource, PolicySource, Stack

HERE = Path(__file__).resolve().parent

SERVICE_NAME = "loadchecker"


def build_stack(*, acme_mount: str = DEFAULT_ACME_MOUNT, base_dir: Path = HERE) -> Stack:
    # No certificates are issued for this service; `acme_mount` keeps the
    # builder signature uniform across stacks.
    return Stack(
        name=SERVICE_NAME,
        jobs={SERVICE_NAME: JobSource(path=base_dir / "job.hcl")},
        policy=PolicySource(name=SERVICE_NAME, path=base_dir / "policy.hcl"),
    )
