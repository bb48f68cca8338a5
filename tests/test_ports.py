from __future__ import annotations

import json
from pathlib import Path

import pytest

from installer_web.ports import read_address_file, write_address_file
from installer_web.server import ServerAddress


def test_write_and_read_address_file(tmp_path: Path) -> None:
    path = tmp_path / "run" / "address.json"

    write_address_file(path, ServerAddress(host="127.0.0.1", port=54321))
    loaded = read_address_file(path)

    assert loaded == ServerAddress(host="127.0.0.1", port=54321)
    assert json.loads(path.read_text(encoding="utf-8"))["url"] == "http://127.0.0.1:54321/"
    assert not (tmp_path / "run" / "address.json.tmp").exists()


def test_read_address_file_missing(tmp_path: Path) -> None:
    assert read_address_file(tmp_path / "nope.json") is None


def test_read_address_file_invalid(tmp_path: Path) -> None:
    path = tmp_path / "address.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")

    with pytest.raises(ValueError):
        read_address_file(path)


def test_ipv6_url_is_bracketed() -> None:
    assert ServerAddress(host="::1", port=8080).url == "http://[::1]:8080/"
