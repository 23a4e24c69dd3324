"""Source jar assembly and provenance marking.

Every archive sourceify publishes carries a marker entry. Its presence is the
only way to tell a synthesized source jar from one that was authored.
"""

import logging
import os
import shutil
import zipfile
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER_FILENAME = "sourceify-decompiled"
MARKER_CONTENT = "Generated by Sourceify!\n"

_COPY_BUFFER_SIZE = 8192


def _write_marker(zf: zipfile.ZipFile) -> None:
    zf.writestr(MARKER_FILENAME, MARKER_CONTENT.encode("utf-8"))


def _entry_name(source_dir: Path, path: Path) -> str:
    return "/".join(path.relative_to(source_dir).parts)


def build_archive(source_dir: Path, dest_path: Path) -> None:
    """Package every regular file below source_dir into a new zip at dest_path.

    The marker entry is written first, followed by one entry per file named by
    its path relative to source_dir with "/" separators. File bytes are
    streamed unmodified.

    Args:
        source_dir: Directory tree to package
        dest_path: Archive to create (truncated if it exists)

    Raises:
        OSError: If a file cannot be read or the archive cannot be written
        UnicodeEncodeError: If a file name is not valid UTF-8
    """
    files = sorted(p for p in source_dir.rglob("*") if p.is_file())
    logger.debug("Assembling %s from %d file(s) in %s", dest_path, len(files), source_dir)

    with zipfile.ZipFile(dest_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        _write_marker(zf)
        for path in files:
            entry = _entry_name(source_dir, path)
            with path.open("rb") as src, zf.open(entry, "w", force_zip64=True) as dst:
                shutil.copyfileobj(src, dst, _COPY_BUFFER_SIZE)


def read_marker(archive_path: Path) -> str | None:
    """Return the marker entry's text, or None if the archive has no marker."""
    with zipfile.ZipFile(archive_path) as zf:
        if MARKER_FILENAME not in zf.namelist():
            return None
        return zf.read(MARKER_FILENAME).decode("utf-8")


def has_marker(archive_path: Path) -> bool:
    """Check whether an archive was synthesized by sourceify."""
    return read_marker(archive_path) is not None


def _copy_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    # dst.open() mutates the ZipInfo it is given; keep the source entry intact
    copy = zipfile.ZipInfo(info.filename, date_time=info.date_time)
    copy.compress_type = info.compress_type
    copy.external_attr = info.external_attr
    copy.comment = info.comment
    return copy


def inject_marker(archive_path: Path) -> None:
    """Create or overwrite the marker entry of an existing archive.

    All other entries are left untouched. Zip files cannot replace an entry in
    place, so an archive that already has a marker is rewritten next to itself
    and renamed over the original.

    Raises:
        OSError: If the archive cannot be read or rewritten
        zipfile.BadZipFile: If archive_path is not a zip file
    """
    with zipfile.ZipFile(archive_path) as zf:
        already_marked = MARKER_FILENAME in zf.namelist()

    if not already_marked:
        with zipfile.ZipFile(archive_path, "a", compression=zipfile.ZIP_DEFLATED) as zf:
            _write_marker(zf)
        return

    logger.debug("Replacing existing marker entry in %s", archive_path)
    rewritten = archive_path.with_name(f".{archive_path.name}.marker.tmp")
    try:
        with (
            zipfile.ZipFile(archive_path) as src,
            zipfile.ZipFile(rewritten, "w", compression=zipfile.ZIP_DEFLATED) as dst,
        ):
            for info in src.infolist():
                if info.filename == MARKER_FILENAME:
                    continue
                with src.open(info) as entry_in, dst.open(
                    _copy_info(info), "w", force_zip64=True
                ) as entry_out:
                    shutil.copyfileobj(entry_in, entry_out, _COPY_BUFFER_SIZE)
            _write_marker(dst)
        os.replace(rewritten, archive_path)
    finally:
        rewritten.unlink(missing_ok=True)
