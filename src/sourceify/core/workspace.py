"""Scoped temporary directories the decompiler writes into."""

import logging
import os
import shutil
import stat
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "sourceify-decompile-"


def acquire_workspace(parent: Path | None = None) -> Path:
    """Create a uniquely named temporary directory.

    Args:
        parent: Directory to create the workspace in (system temp dir if None)

    Raises:
        OSError: If the directory cannot be created
    """
    path = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=parent))
    logger.debug("Acquired workspace %s", path)
    return path


def _make_writable_and_retry(func, path, _exc) -> None:
    # removing an entry needs write permission on its parent directory
    os.chmod(os.path.dirname(path), stat.S_IRWXU)
    if not os.path.islink(path):
        os.chmod(path, stat.S_IRWXU)
    func(path)


def release_workspace(path: Path) -> None:
    """Recursively delete a workspace, children before parents.

    Files the decompiler created after acquisition are removed too, including
    read-only ones. A workspace that is already gone is not an error.

    Raises:
        OSError: If part of the tree cannot be removed
    """
    if not path.exists():
        return
    shutil.rmtree(path, onexc=_make_writable_and_retry)
    logger.debug("Released workspace %s", path)


@contextmanager
def workspace(parent: Path | None = None) -> Iterator[Path]:
    """Acquire a workspace and release it on every exit path.

    Example:
        with workspace() as out_dir:
            decompiler.decompile(jar, out_dir)
        # out_dir no longer exists here, even if decompile raised
    """
    path = acquire_workspace(parent)
    try:
        yield path
    finally:
        release_workspace(path)
