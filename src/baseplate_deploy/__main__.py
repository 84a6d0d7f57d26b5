"""
baseplate_deploy.__main__

Entrypoint for running a provisioning pass via `python -m baseplate_deploy`.

Responsibilities:
- Load settings and configure logging.
- Open the Nomad/Vault HTTP clients for the duration of the pass.
- Run `up` (default) or `destroy` for the selected stack.
"""

from __future__ import annotations

import asyncio

import click

from baseplate_deploy.clients import nomad as nomad_client
from baseplate_deploy.clients import vault as vault_client
from baseplate_deploy.observability.logging import configure_logging, get_logger
from baseplate_deploy.provisioning.resources import ProvisioningResult, Stack
from baseplate_deploy.services.provisioning_service import ProvisioningService
from baseplate_deploy.settings import Settings, get_settings
from baseplate_deploy.stacks import DEFAULT_STACK, STACKS, get_stack

log = get_logger(__name__)


async def run(*, settings: Settings, stack: Stack, action: str) -> ProvisioningResult:
    async with (
        nomad_client.create_http(settings) as nomad_http,
        vault_client.create_http(settings) as vault_http,
    ):
        service = ProvisioningService(
            nomad=nomad_client.NomadClient(settings=settings, http=nomad_http),
            vault=vault_client.VaultClient(settings=settings, http=vault_http),
        )
        if action == "destroy":
            return await service.destroy(stack)
        return await service.up(stack)


@click.command()
@click.argument("action", type=click.Choice(["up", "destroy"]), default="up")
@click.option(
    "--stack",
    "stack_name",
    type=click.Choice(sorted(STACKS)),
    default=DEFAULT_STACK,
    show_default=True,
    help="Stack to provision.",
)
def main(action: str, stack_name: str) -> None:
    """Provision (or tear down) a baseplate stack on Nomad and Vault."""
    settings = get_settings()
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json=settings.log_json,
    )

    stack = get_stack(stack_name, acme_mount=settings.acme_mount)
    result = asyncio.run(run(settings=settings, stack=stack, action=action))
    log.info(
        "done",
        action=action,
        stack=result.stack,
        jobs={name: job.job_id for name, job in result.jobs.items()},
        policy=result.policy,
        roles=list(result.roles),
        deregistered=dict(result.deregistered),
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Errors are not caught here: a failed pass exits non-zero, and the registrant
# that failed has already logged which resource it was applying.
