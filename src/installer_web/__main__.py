from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from installer_web.assets import STATIC_DIR, DirectoryAssetResolver
from installer_web.config import load_installer_config, load_server_config
from installer_web.installer import InstallerFramework
from installer_web.ports import write_address_file
from installer_web.server import BindError, WebServer

logger = logging.getLogger(__name__)


def _optional_path(raw: str | None) -> Path | None:
    if not raw:
        return None
    return Path(raw).expanduser().resolve()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Loopback HTTP server for the installer UI")
    p.add_argument("--config", help="Installer config JSON (served as /api/config)")
    p.add_argument("--server-config", help="Server config JSON (network, logging)")
    p.add_argument("--assets", help=f"UI asset directory (default: {STATIC_DIR})")
    p.add_argument("--host", help="Bind host (overrides config and INSTALLER_WEB_BIND)")
    p.add_argument("--port", type=int, help="Bind port; 0 picks a free port")
    p.add_argument("--address-file", help="Write the bound address to this JSON file")
    p.add_argument("--log-file", help="Also log to this file (rotated)")

    args = p.parse_args(argv)

    server_config = load_server_config(_optional_path(args.server_config))

    # Configure logging
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = _optional_path(args.log_file)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=server_config.logging.max_size_mb * 1024 * 1024,
                backupCount=server_config.logging.backup_count,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=server_config.logging.level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    installer_config = load_installer_config(_optional_path(args.config))
    framework = InstallerFramework(installer_config)

    assets_dir = _optional_path(args.assets) or STATIC_DIR
    if not assets_dir.is_dir():
        logger.warning(f"UI asset directory is missing ({assets_dir}); every asset will 404")

    host = args.host or os.environ.get("INSTALLER_WEB_BIND") or server_config.network.bind_host

    env_port = os.environ.get("INSTALLER_WEB_PORT")
    if args.port is not None:
        port = args.port
    elif env_port:
        port = int(env_port)
    else:
        port = server_config.network.port

    try:
        server = WebServer.with_addr(
            framework, (host, port), assets=DirectoryAssetResolver(assets_dir)
        )
    except BindError as e:
        logger.error(f"Failed to start installer UI server: {e}")
        return 1

    addr = server.get_addr()
    address_file = _optional_path(args.address_file)
    if address_file is not None:
        write_address_file(address_file, addr)

    # The launcher reads this line to find the UI.
    print(addr.url, flush=True)

    try:
        server.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
