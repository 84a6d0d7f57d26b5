"""
tests.test_main

Module entrypoint wiring (argument handling, stack selection).
"""

from __future__ import annotations

import pytest
import structlog
from click.testing import CliRunner

import baseplate_deploy.__main__ as entry
from baseplate_deploy.provisioning.resources import ProvisioningResult, SubmittedJob
from baseplate_deploy.settings import Settings


@pytest.fixture(autouse=True)
def _reset_structlog():
    # `main` configures logging globally.
    yield
    structlog.reset_defaults()


@pytest.fixture
def captured(monkeypatch) -> dict:
    seen: dict = {}

    async def fake_run(*, settings, stack, action):
        seen.update(settings=settings, stack=stack, action=action)
        return ProvisioningResult(
            stack=stack.name,
            jobs={stack.name: SubmittedJob(name=stack.name, job_id=stack.name, eval_id="e", job_modify_index=1)},
        )

    monkeypatch.setattr(entry, "run", fake_run)
    monkeypatch.setattr(
        entry,
        "get_settings",
        lambda: Settings(env="test", acme_mount="acme-test", log_json=False),
    )
    return seen


def test_defaults_to_up_for_acme_example(captured) -> None:
    result = CliRunner().invoke(entry.main, [])

    assert result.exit_code == 0, result.output
    assert captured["action"] == "up"
    assert captured["stack"].name == "acme-example"
    assert captured["stack"].roles[0].mount == "acme-test"


def test_destroy_selected_stack(captured) -> None:
    result = CliRunner().invoke(entry.main, ["destroy", "--stack", "loadchecker"])

    assert result.exit_code == 0, result.output
    assert captured["action"] == "destroy"
    assert captured["stack"].name == "loadchecker"


def test_rejects_unknown_action(captured) -> None:
    result = CliRunner().invoke(entry.main, ["apply"])

    assert result.exit_code != 0
    assert captured == {}
