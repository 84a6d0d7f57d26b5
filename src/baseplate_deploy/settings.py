"""
baseplate_deploy.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the Nomad/Vault clients and logging.
- Accept the standard `NOMAD_*` / `VAULT_*` variables alongside prefixed ones.
- Hide tokens from repr/logging.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BASEPLATE_",
        case_sensitive=False,
        populate_by_name=True,
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "baseplate-deploy"
    log_level: str = "INFO"
    log_json: bool = True

    # Nomad
    nomad_addr: str = Field(
        default="http://localhost:4646",
        validation_alias=AliasChoices("BASEPLATE_NOMAD_ADDR", "NOMAD_ADDR", "nomad_addr"),
    )
    nomad_token: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("BASEPLATE_NOMAD_TOKEN", "NOMAD_TOKEN", "nomad_token"),
    )
    # Blocking query wait used while following evaluations/deployments.
    nomad_wait: str = "30s"

    # Vault
    vault_addr: str = Field(
        default="https://127.0.0.1:8200",
        validation_alias=AliasChoices("BASEPLATE_VAULT_ADDR", "VAULT_ADDR", "vault_addr"),
    )
    vault_token: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("BASEPLATE_VAULT_TOKEN", "VAULT_TOKEN", "vault_token"),
    )
    vault_namespace: str = Field(
        default="",
        validation_alias=AliasChoices(
            "BASEPLATE_VAULT_NAMESPACE", "VAULT_NAMESPACE", "vault_namespace"
        ),
    )

    # Mount of the ACME secrets engine that role endpoints are written under.
    acme_mount: str = "acme"

    http_timeout_seconds: float = 60.0

    @field_validator("nomad_addr", "vault_addr")
    @classmethod
    def _ensure_scheme(cls, v: str) -> str:
        # The Nomad tooling accepts a bare `host:port`; httpx needs a scheme.
        v = v.strip().rstrip("/")
        if "://" not in v:
            v = f"http://{v}"
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Nomad/Vault addresses default to the same values their CLIs use, so a shell
# that already talks to the cluster can run a deployment without extra setup.
