"""Integration tests for RealDecompiler.

Most tests run a real shell script as the decompiler; the remaining ones mock
subprocess.run to check the exact invocation.
"""

import os
import stat
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from sourceify.ops.decompiler_real import RealDecompiler, is_executable


def _script(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "decompile.sh"
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_successful_decompiler_writes_into_output_dir(tmp_path: Path) -> None:
    script = _script(tmp_path, 'mkdir -p "$2/pkg" && echo "from $1" > "$2/pkg/Out.java"\n')
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    jar = tmp_path / "foo-1.0.jar"
    jar.write_bytes(b"PK")

    assert RealDecompiler(script).decompile(jar, out_dir) is True
    assert (out_dir / "pkg" / "Out.java").read_text(encoding="utf-8") == f"from {jar}\n"


def test_non_zero_exit_is_failure(tmp_path: Path) -> None:
    script = _script(tmp_path, "exit 3\n")

    assert RealDecompiler(script).decompile(tmp_path / "foo.jar", tmp_path) is False


def test_missing_executable_is_failure(tmp_path: Path) -> None:
    decompiler = RealDecompiler(tmp_path / "does-not-exist")

    assert decompiler.decompile(tmp_path / "foo.jar", tmp_path) is False


def test_invokes_with_absolute_paths_and_inherited_streams(
    tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.chdir(tmp_path)
    decompiler = RealDecompiler(Path("tools/fernflower.sh"))
    mock_result = MagicMock()
    mock_result.returncode = 0

    with patch("subprocess.run", return_value=mock_result) as mock_run:
        result = decompiler.decompile(Path("repo/foo.jar"), Path("work"))

    assert result is True
    mock_run.assert_called_once_with(
        [
            str(tmp_path / "tools" / "fernflower.sh"),
            str(tmp_path / "repo" / "foo.jar"),
            str(tmp_path / "work"),
        ],
        check=False,
    )


def test_permission_error_is_failure(tmp_path: Path) -> None:
    with patch("subprocess.run", side_effect=PermissionError("denied")):
        assert RealDecompiler(tmp_path / "x").decompile(tmp_path / "a.jar", tmp_path) is False


def test_returns_false_on_nonzero_mocked_exit(tmp_path: Path) -> None:
    mock_result = MagicMock(spec=subprocess.CompletedProcess)
    mock_result.returncode = 1

    with patch("subprocess.run", return_value=mock_result):
        assert RealDecompiler(tmp_path / "x").decompile(tmp_path / "a.jar", tmp_path) is False


def test_is_executable(tmp_path: Path) -> None:
    script = _script(tmp_path, "exit 0\n")
    plain = tmp_path / "plain.txt"
    plain.write_text("", encoding="utf-8")
    os.chmod(plain, stat.S_IRUSR | stat.S_IWUSR)

    assert is_executable(script)
    assert not is_executable(tmp_path)
    assert not is_executable(tmp_path / "missing")
    if os.geteuid() != 0:
        assert not is_executable(plain)
