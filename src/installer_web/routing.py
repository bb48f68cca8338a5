"""Request dispatch for the installer UI server.

``route`` maps a request method and path onto a ``ResponseAction``. It never
touches the network: the app layer turns the action into an HTTP response, which
keeps every branch (including process exit) testable with fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from installer_web.assets import AssetResolver
from installer_web.installer import InstallerFramework
from installer_web.models import FileSelection

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
INDEX_DOCUMENT = "index.html"


@dataclass(frozen=True)
class ServeJson:
    body: str


@dataclass(frozen=True)
class ServeAsset:
    content_type: str
    body: bytes


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Terminate:
    exit_code: int = 0


ResponseAction = ServeJson | ServeAsset | NotFound | Terminate


def encapsulate_json(field_name: str, json_text: str) -> str:
    """Wrap JSON as a script assignment so a <script> tag can load it during boot."""

    return f"var {field_name} = {json_text};"


def normalize_asset_path(path: str) -> str:
    if path.endswith("/"):
        return path + INDEX_DOCUMENT
    return path


def _file_selection(path: str | None) -> ServeJson:
    return ServeJson(FileSelection(path=path).model_dump_json())


def _config(framework: InstallerFramework, assets: AssetResolver, path: str) -> ResponseAction:
    return ServeJson(encapsulate_json("config", framework.get_config_json()))


def _file_select(framework: InstallerFramework, assets: AssetResolver, path: str) -> ResponseAction:
    return _file_selection(framework.select_folder())


def _default_path(
    framework: InstallerFramework, assets: AssetResolver, path: str
) -> ResponseAction:
    return _file_selection(framework.get_default_path())


def _exit(framework: InstallerFramework, assets: AssetResolver, path: str) -> ResponseAction:
    return Terminate(exit_code=0)


def _static(framework: InstallerFramework, assets: AssetResolver, path: str) -> ResponseAction:
    normalized = normalize_asset_path(path)
    logger.debug(f"Trying {path} => {normalized}")

    asset = assets.lookup(normalized)
    if asset is None:
        return NotFound()
    return ServeAsset(content_type=asset.content_type, body=asset.body)


_GET_ROUTES = {
    "/api/config": _config,
    "/api/file-select": _file_select,
    "/api/default-path": _default_path,
    "/api/exit": _exit,
}


def route(
    method: str,
    path: str,
    framework: InstallerFramework,
    assets: AssetResolver,
) -> ResponseAction:
    if method != "GET":
        return NotFound()

    handler = _GET_ROUTES.get(path, _static)
    return handler(framework, assets, path)
