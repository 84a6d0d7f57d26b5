"""
tests.test_settings

Environment handling for Settings.
"""

from __future__ import annotations

import pytest

from baseplate_deploy.settings import Settings

_ENV = (
    "NOMAD_ADDR",
    "NOMAD_TOKEN",
    "VAULT_ADDR",
    "VAULT_TOKEN",
    "VAULT_NAMESPACE",
    "BASEPLATE_NOMAD_ADDR",
    "BASEPLATE_ACME_MOUNT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings()
    assert s.nomad_addr == "http://localhost:4646"
    assert s.vault_addr == "https://127.0.0.1:8200"
    assert s.acme_mount == "acme"
    assert s.nomad_token == ""


def test_standard_cluster_variables(monkeypatch) -> None:
    monkeypatch.setenv("NOMAD_ADDR", "10.0.0.5:4646")
    monkeypatch.setenv("NOMAD_TOKEN", "n")
    monkeypatch.setenv("VAULT_ADDR", "https://vault.internal:8200/")
    monkeypatch.setenv("VAULT_TOKEN", "v")

    s = Settings()

    assert s.nomad_addr == "http://10.0.0.5:4646"
    assert s.nomad_token == "n"
    assert s.vault_addr == "https://vault.internal:8200"
    assert s.vault_token == "v"


def test_prefixed_variables(monkeypatch) -> None:
    monkeypatch.setenv("BASEPLATE_NOMAD_ADDR", "https://nomad.internal")
    monkeypatch.setenv("BASEPLATE_ACME_MOUNT", "acme-prod")

    s = Settings()

    assert s.nomad_addr == "https://nomad.internal"
    assert s.acme_mount == "acme-prod"


def test_tokens_are_hidden_from_repr() -> None:
    s = Settings(nomad_token="nomad-secret", vault_token="vault-secret")
    assert "nomad-secret" not in repr(s)
    assert "vault-secret" not in repr(s)
