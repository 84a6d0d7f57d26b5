"""
baseplate_deploy.stacks.acme_example

Deployment of the `acme-example` HTTPS server.

Resources:
- Nomad job `acme-example` (`job.hcl`, templates pulled in with `file()`).
- Vault policy `acme-example` (`policy.hcl`).
- ACME role `<mount>/roles/acme-example` issuing staging certificates for the service domain.

The role path follows `acme_mount`, but `policy.hcl` and the certificate
templates name the default `acme` mount literally. Running against another
mount (`BASEPLATE_ACME_MOUNT`) needs a copy of these assets with the paths
changed, passed in through `base_dir`; `build_stack` warns when the shipped
assets are paired with a different mount.
"""

from __future__ import annotations

from pathlib import Path

from baseplate_deploy.observability.logging import get_logger
from baseplate_deploy.provisioning.resources import (
    DEFAULT_ACME_MOUNT,
    AcmeRole,
    AcmeRoleSource,
    JobSource,
    PolicySource,
    Stack,
)

HERE = Path(__file__).resolve().parent

log = get_logger(__name__)

SERVICE_NAME = "acme-example"

ROLE = AcmeRole(
    account="letsencrypt-staging",
    allowed_domains="acme-example.prod.stratos.host",
    allow_subdomains=True,
    allow_bare_domains=False,
)


def build_stack(*, acme_mount: str = DEFAULT_ACME_MOUNT, base_dir: Path = HERE) -> Stack:
    if acme_mount.strip("/") != DEFAULT_ACME_MOUNT and base_dir == HERE:
        log.warning(
            "stack.acme_mount_mismatch",
            stack=SERVICE_NAME,
            acme_mount=acme_mount,
            assets_mount=DEFAULT_ACME_MOUNT,
        )
    return Stack(
        name=SERVICE_NAME,
        jobs={SERVICE_NAME: JobSource(path=base_dir / "job.hcl")},
        policy=PolicySource(name=SERVICE_NAME, path=base_dir / "policy.hcl"),
        roles=(AcmeRoleSource(job=SERVICE_NAME, role=ROLE, mount=acme_mount),),
    )
