from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from installer_web.config import (
    InstallerConfig,
    ServerConfig,
    load_installer_config,
    load_server_config,
)


def test_load_configs_default_when_missing(tmp_path: Path) -> None:
    installer = load_installer_config(tmp_path / "missing.json")
    server = load_server_config(None)

    assert isinstance(installer, InstallerConfig)
    assert installer.packages == []
    assert isinstance(server, ServerConfig)
    assert server.network.bind_host == "127.0.0.1"
    assert server.network.port == 0


def test_load_installer_config_from_file(tmp_path: Path) -> None:
    path = tmp_path / "installer.json"
    path.write_text(
        json.dumps(
            {
                "general": {"name": "yuzu", "installing_message": "Thanks!"},
                "packages": [
                    {"name": "Nightly", "description": "Bleeding edge", "default": True},
                    {"name": "Stable"},
                ],
            }
        ),
        encoding="utf-8",
    )

    cfg = load_installer_config(path)
    assert cfg.general.name == "yuzu"
    assert [p.name for p in cfg.packages] == ["Nightly", "Stable"]
    assert cfg.packages[1].default is None


def test_load_server_config_validation_error(tmp_path: Path) -> None:
    path = tmp_path / "server.json"
    path.write_text(json.dumps({"network": {"port": 70000}}), encoding="utf-8")

    with pytest.raises(ValidationError):
        load_server_config(path)
