from __future__ import annotations

import logging

from pydantic_core import PydanticSerializationError

from installer_web.config import InstallerConfig
from installer_web.dialogs import DialogError, FolderPicker, TkFolderPicker
from installer_web.home import default_install_path, resolve_install_path

logger = logging.getLogger(__name__)


class ConfigSerializationError(RuntimeError):
    """The installer configuration could not be rendered as JSON."""


class InstallerFramework:
    """Read-only view of the installer that request handlers are allowed to use.

    Instances are shared across concurrent requests and never mutated after
    construction.
    """

    def __init__(self, config: InstallerConfig, *, picker: FolderPicker | None = None) -> None:
        self._config = config
        self._picker: FolderPicker = picker if picker is not None else TkFolderPicker()

    def get_config_json(self) -> str:
        try:
            return self._config.model_dump_json()
        except PydanticSerializationError as e:
            raise ConfigSerializationError(str(e)) from e

    def get_default_path(self) -> str | None:
        general = self._config.general

        raw = (general.default_path or "").strip()
        if raw:
            return str(resolve_install_path(raw))
        if not general.derive_default_path:
            return None

        derived = default_install_path(general.name)
        return str(derived) if derived is not None else None

    def select_folder(self) -> str | None:
        """Run the blocking folder dialog. Errors count as "nothing selected"."""

        try:
            return self._picker.pick_folder(self.get_default_path())
        except DialogError as e:
            logger.warning(f"Folder dialog failed: {e}")
            return None
