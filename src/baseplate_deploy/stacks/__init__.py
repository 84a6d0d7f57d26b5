"""
baseplate_deploy.stacks

Registry of deployable stacks.

Each stack lives in its own package with its HCL assets beside the module, and
exposes `build_stack(*, acme_mount, base_dir)`.
"""

from __future__ import annotations

from collections.abc import Callable

from baseplate_deploy.provisioning.resources import Stack
from baseplate_deploy.stacks import acme_example, loadchecker

StackBuilder = Callable[..., Stack]

STACKS: dict[str, StackBuilder] = {
    acme_example.SERVICE_NAME: acme_example.build_stack,
    loadchecker.SERVICE_NAME: loadchecker.build_stack,
}

DEFAULT_STACK = acme_example.SERVICE_NAME


def get_stack(name: str, *, acme_mount: str) -> Stack:
    try:
        builder = STACKS[name]
    except KeyError:
        raise KeyError(f"unknown stack {name!r}; known: {', '.join(sorted(STACKS))}") from None
    return builder(acme_mount=acme_mount)
