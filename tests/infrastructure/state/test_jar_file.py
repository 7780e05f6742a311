from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from owner_commons import properties
from owner_commons.config.storage import StorageSettings
from owner_commons.infrastructure.state.jar_file import pack_entry, read_entry, save_jar

SAMPLE = {"server.http.port": "80", "path": "C:\\Users\\John", "name": "J\u00fcrgen"}


def test_pack_entry_writes_single_entry(tmp_path: Path) -> None:
    target = tmp_path / "lib" / "config.jar"

    assert pack_entry(target, "org/owner/App.properties", SAMPLE) == target

    with zipfile.ZipFile(target) as archive:
        assert archive.namelist() == ["org/owner/App.properties"]
        info = archive.getinfo("org/owner/App.properties")
        assert info.compress_type == zipfile.ZIP_DEFLATED
        assert properties.from_bytes(archive.read(info)) == SAMPLE
    assert read_entry(target, "org/owner/App.properties") == SAMPLE


def test_pack_entry_truncates_existing_archive(tmp_path: Path) -> None:
    target = tmp_path / "config.jar"
    save_jar(target, "first.properties", {"a": "1"})

    save_jar(target, "second.properties", {"b": "2"})

    with zipfile.ZipFile(target) as archive:
        assert archive.namelist() == ["second.properties"]
    with pytest.raises(KeyError):
        read_entry(target, "first.properties")


def test_pack_entry_writes_comment_header(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OWNER_STORE_COMMENT", "packed")
    target = tmp_path / "config.jar"
    pack_entry(target, "app.properties", {"a": "1"}, settings=StorageSettings())

    with zipfile.ZipFile(target) as archive:
        assert archive.read("app.properties") == b"#packed\na=1\n"


def test_pack_entry_requires_entry_name(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="entry_name"):
        pack_entry(tmp_path / "config.jar", "", SAMPLE)


def test_pack_entry_follows_disabled_store_comment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OWNER_STORE_COMMENT", "")
    target = tmp_path / "config.jar"

    pack_entry(target, "app.properties", {"a": "1"})

    assert read_entry(target, "app.properties") == {"a": "1"}
    with zipfile.ZipFile(target) as archive:
        assert archive.read("app.properties") == b"a=1\n"


def test_pack_entry_defaults_to_store_comment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OWNER_STORE_COMMENT", raising=False)
    target = tmp_path / "config.jar"

    pack_entry(target, "app.properties", {"a": "1"})

    with zipfile.ZipFile(target) as archive:
        assert archive.read("app.properties") == b"#saved for test\na=1\n"
