from __future__ import annotations

import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"


@dataclass(frozen=True)
class Asset:
    content_type: str
    body: bytes


class AssetResolver(Protocol):
    def lookup(self, path: str) -> Asset | None:
        """Resolve a request path such as ``/index.html``; None when missing."""
        ...


def guess_content_type(name: str) -> str:
    guess, _enc = mimetypes.guess_type(name)
    if guess:
        return guess
    return "application/octet-stream"


def _relative_parts(path: str) -> tuple[str, ...] | None:
    parts = PurePosixPath("/" + path.lstrip("/")).parts[1:]
    if not parts or any(p in ("..", ".") for p in parts):
        return None
    return parts


class DirectoryAssetResolver:
    """Serve UI assets from a directory on disk (defaults to the bundled static/ dir)."""

    def __init__(self, root: Path = STATIC_DIR) -> None:
        self._root = root.resolve()

    def lookup(self, path: str) -> Asset | None:
        parts = _relative_parts(path)
        if parts is None:
            return None

        candidate = self._root.joinpath(*parts).resolve()
        if not candidate.is_relative_to(self._root) or not candidate.is_file():
            return None

        return Asset(content_type=guess_content_type(candidate.name), body=candidate.read_bytes())


class MappingAssetResolver:
    """In-memory assets keyed by relative path (``index.html``, ``js/app.js``)."""

    def __init__(self, files: Mapping[str, bytes]) -> None:
        self._files = {k.lstrip("/"): v for k, v in files.items()}

    def lookup(self, path: str) -> Asset | None:
        parts = _relative_parts(path)
        if parts is None:
            return None

        key = "/".join(parts)
        body = self._files.get(key)
        if body is None:
            return None
        return Asset(content_type=guess_content_type(key), body=body)
