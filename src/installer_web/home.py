from __future__ import annotations

import os
import sys
from pathlib import Path


def _install_base(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ

    # Per-user location: never depends on current working directory.
    if sys.platform.startswith("win"):
        base = env.get("LOCALAPPDATA") or env.get("APPDATA")
        if base:
            return Path(base)
        return Path.home() / "AppData" / "Local"

    if sys.platform == "darwin":
        return Path.home() / "Applications"

    xdg = env.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def default_install_path(app_name: str, environ: dict[str, str] | None = None) -> Path | None:
    """Per-platform default directory to install ``app_name`` into.

    Returns None when the application has no usable name.
    """

    name = app_name.strip()
    if not name:
        return None
    return _install_base(environ) / name


def resolve_install_path(raw: str, environ: dict[str, str] | None = None) -> Path:
    candidate = Path(raw).expanduser()
    # Relative defaults are anchored at the per-user base, not CWD (installers are often
    # launched from Downloads).
    if not candidate.is_absolute():
        candidate = _install_base(environ) / candidate
    return candidate
