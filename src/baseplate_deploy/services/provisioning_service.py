"""
baseplate_deploy.services.provisioning_service

Provisioning pass owner.

Responsibilities:
- Materialize a stack (read every file) before touching the network.
- Run the registrants in order: jobs, policy, roles.
- Run the reverse order for teardown.

Nothing here is transactional: if a later step fails, earlier steps stay applied.
"""

from __future__ import annotations

from baseplate_deploy.clients.nomad import NomadClient
from baseplate_deploy.clients.vault import VaultClient
from baseplate_deploy.observability.context import provisioning_context
from baseplate_deploy.observability.logging import get_logger
from baseplate_deploy.provisioning import registrants
from baseplate_deploy.provisioning.resources import ProvisioningResult, Stack, materialize

log = get_logger(__name__)


class ProvisioningService:
    def __init__(self, *, nomad: NomadClient, vault: VaultClient) -> None:
        self._nomad = nomad
        self._vault = vault

    async def up(self, stack: Stack) -> ProvisioningResult:
        with provisioning_context(stack=stack.name, action="up"):
            manifest = materialize(stack)
            log.info(
                "pass.start",
                jobs=sorted(manifest.jobs),
                policy=manifest.policy.name if manifest.policy else None,
                roles=[r.path for r in manifest.roles],
            )

            jobs = await registrants.register_jobs(manifest.jobs, nomad=self._nomad)
            policy = None
            if manifest.policy is not None:
                policy = await registrants.register_policy(manifest.policy, vault=self._vault)
            roles = await registrants.register_roles(manifest.roles, vault=self._vault)

            log.info("pass.complete")
            return ProvisioningResult(stack=stack.name, jobs=jobs, policy=policy, roles=roles)

    async def destroy(self, stack: Stack) -> ProvisioningResult:
        with provisioning_context(stack=stack.name, action="destroy"):
            manifest = materialize(stack)
            log.info("pass.start")

            roles = await registrants.delete_roles(manifest.roles, vault=self._vault)
            policy = None
            if manifest.policy is not None:
                policy = await registrants.delete_policy(manifest.policy, vault=self._vault)
            deregistered = await registrants.deregister_jobs(manifest.jobs, nomad=self._nomad)

            log.info("pass.complete")
            return ProvisioningResult(
                stack=stack.name, policy=policy, roles=roles, deregistered=deregistered
            )


# --- Module Notes -----------------------------------------------------------
# Re-running `up` against existing resources relies on Nomad's job register and
# Vault's PUT being upserts; nothing here diffs against current state.
