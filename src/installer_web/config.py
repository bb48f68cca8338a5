from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="127.0.0.1")
    port: int = Field(
        default=0,
        ge=0,
        le=65535,
        description="TCP port to listen on; 0 lets the OS pick a free ephemeral port.",
    )


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class ServerConfig(BaseModel):
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class GeneralConfig(BaseModel):
    name: str = Field(default="", description="Application name shown by the UI.")
    installing_message: str = Field(default="")
    default_path: str | None = Field(
        default=None,
        description=(
            "Optional install directory offered by default; if relative, resolved under the "
            "per-user application base directory"
        ),
    )
    derive_default_path: bool = Field(
        default=True,
        description="If default_path is omitted, derive <base>/<name> for the current platform.",
    )


class PackageDescription(BaseModel):
    name: str
    description: str = Field(default="")
    default: bool | None = Field(
        default=None, description="Whether the package is preselected in the UI."
    )


class InstallerConfig(BaseModel):
    """Configuration handed to the installer UI as-is via /api/config."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    packages: list[PackageDescription] = Field(default_factory=list)


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_installer_config(path: Path | None) -> InstallerConfig:
    """Load the installer config from a JSON file.

    - If missing: returns defaults.
    - Validation is performed by Pydantic.
    """

    if path is None or not path.exists():
        return InstallerConfig()
    return InstallerConfig.model_validate(_read_json(path))


def load_server_config(path: Path | None) -> ServerConfig:
    if path is None or not path.exists():
        return ServerConfig()
    return ServerConfig.model_validate(_read_json(path))
