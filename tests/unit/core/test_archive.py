"""Tests for source archive assembly and marker injection."""

import zipfile
from pathlib import Path

import pytest

from sourceify.core.archive import (
    MARKER_CONTENT,
    MARKER_FILENAME,
    build_archive,
    has_marker,
    inject_marker,
    read_marker,
)
from tests.test_utils.repo_helpers import zip_entries


def _write(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def test_build_archive_writes_marker_first_then_files(tmp_path: Path) -> None:
    source_dir = tmp_path / "decompiled"
    _write(source_dir / "com" / "example" / "Foo.java", b"class Foo {}\n")
    _write(source_dir / "com" / "example" / "inner" / "Bar.java", b"class Bar {}\n")
    _write(source_dir / "META-INF" / "MANIFEST.MF", b"Manifest-Version: 1.0\n")
    dest = tmp_path / "out.jar"

    build_archive(source_dir, dest)

    with zipfile.ZipFile(dest) as zf:
        names = zf.namelist()
    assert names[0] == MARKER_FILENAME
    assert sorted(names[1:]) == [
        "META-INF/MANIFEST.MF",
        "com/example/Foo.java",
        "com/example/inner/Bar.java",
    ]
    entries = zip_entries(dest)
    assert entries[MARKER_FILENAME] == b"Generated by Sourceify!\n"
    assert entries["com/example/inner/Bar.java"] == b"class Bar {}\n"


def test_build_archive_of_empty_directory_contains_only_marker(tmp_path: Path) -> None:
    source_dir = tmp_path / "empty"
    (source_dir / "nested").mkdir(parents=True)
    dest = tmp_path / "out.jar"

    build_archive(source_dir, dest)

    assert zip_entries(dest) == {MARKER_FILENAME: MARKER_CONTENT.encode("utf-8")}


def test_build_archive_streams_binary_content_unmodified(tmp_path: Path) -> None:
    payload = bytes(range(256)) * 100
    _write(tmp_path / "src" / "blob.bin", payload)
    dest = tmp_path / "out.jar"

    build_archive(tmp_path / "src", dest)

    assert zip_entries(dest)["blob.bin"] == payload


def test_inject_marker_adds_marker_and_keeps_entries(tmp_path: Path) -> None:
    archive = tmp_path / "emitted.jar"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("com/example/Foo.java", "class Foo {}")
        zf.writestr("com/example/Bar.java", "class Bar {}")

    inject_marker(archive)

    entries = zip_entries(archive)
    assert entries[MARKER_FILENAME] == MARKER_CONTENT.encode("utf-8")
    assert entries["com/example/Foo.java"] == b"class Foo {}"
    assert entries["com/example/Bar.java"] == b"class Bar {}"
    assert len(entries) == 3


def test_inject_marker_overwrites_existing_marker(tmp_path: Path) -> None:
    archive = tmp_path / "emitted.jar"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("com/example/Foo.java", "class Foo {}")
        zf.writestr(MARKER_FILENAME, "stale content")
        zf.writestr("com/example/", "")

    inject_marker(archive)

    with zipfile.ZipFile(archive) as zf:
        names = zf.namelist()
        assert names.count(MARKER_FILENAME) == 1
        assert zf.read(MARKER_FILENAME) == MARKER_CONTENT.encode("utf-8")
        assert zf.read("com/example/Foo.java") == b"class Foo {}"
        assert "com/example/" in names
    assert not (tmp_path / ".emitted.jar.marker.tmp").exists()


def test_inject_marker_is_idempotent(tmp_path: Path) -> None:
    archive = tmp_path / "emitted.jar"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("Foo.java", "class Foo {}")

    inject_marker(archive)
    inject_marker(archive)

    with zipfile.ZipFile(archive) as zf:
        assert zf.namelist().count(MARKER_FILENAME) == 1


def test_inject_marker_rejects_non_zip(tmp_path: Path) -> None:
    archive = tmp_path / "broken.jar"
    archive.write_bytes(b"not a zip")

    with pytest.raises(zipfile.BadZipFile):
        inject_marker(archive)


def test_read_marker_and_has_marker(tmp_path: Path) -> None:
    authored = tmp_path / "authored.jar"
    with zipfile.ZipFile(authored, "w") as zf:
        zf.writestr("Foo.java", "class Foo {}")
    source_dir = tmp_path / "src"
    _write(source_dir / "Foo.java", b"class Foo {}")
    synthesized = tmp_path / "synthesized.jar"
    build_archive(source_dir, synthesized)

    assert read_marker(authored) is None
    assert not has_marker(authored)
    assert read_marker(synthesized) == MARKER_CONTENT
    assert has_marker(synthesized)
