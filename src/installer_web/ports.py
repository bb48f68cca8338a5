from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from installer_web.server import ServerAddress


def _parse_address(data: dict[str, Any]) -> ServerAddress:
    host = data.get("host")
    port = data.get("port")
    if not isinstance(host, str) or port is None:
        raise ValueError("address file must contain 'host' and 'port'")
    return ServerAddress(host=host, port=int(port))


def read_address_file(path: Path) -> ServerAddress | None:
    """Read the address a running server published with write_address_file."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid address file format at {path}")
    return _parse_address(data)


def write_address_file(path: Path, addr: ServerAddress) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "host": addr.host,
        "port": addr.port,
        "url": addr.url,
    }
    # Write-then-rename so a polling launcher never sees a half-written file.
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
        f.write("\n")
    tmp.replace(path)
