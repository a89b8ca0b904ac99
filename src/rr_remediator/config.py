"""Configuration and environment for the round-robin remediator."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Remediator settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="RR_REMEDIATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # vCenter
    server: str | None = Field(default=None, description="vCenter hostname or FQDN")
    port: int = Field(default=443, ge=1, le=65535, description="vCenter HTTPS port")
    username: str | None = Field(default=None, description="vCenter user, prompted for if unset")
    password: SecretStr | None = Field(default=None, description="vCenter password, prompted for if unset")
    disable_ssl_verification: bool = Field(
        default=False,
        description="Skip vCenter certificate verification (self-signed lab certificates)",
    )
    connect_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Seconds to wait for the TCP reachability probe",
    )

    # Workflow
    cluster: str | None = Field(default=None, description="Cluster to remediate, prompted for if unset")
    output_dir: Path = Field(default=Path("."), description="Directory receiving the CSV reports")
    dry_run: bool = Field(
        default=False,
        description="If true, report only; do not change any path-switch threshold",
    )


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
