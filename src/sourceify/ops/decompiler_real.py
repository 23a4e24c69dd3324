"""Real decompiler operations running an external executable.

The executable is invoked as ``<decompiler> <jar> <out_dir>`` with absolute
paths. Its standard streams are inherited so its progress output reaches the
user directly. There is no timeout: a hung decompiler blocks only the task
that started it.
"""

import logging
import os
import subprocess
from pathlib import Path

from sourceify.ops.decompiler import Decompiler

logger = logging.getLogger(__name__)


def is_executable(path: Path) -> bool:
    """Check that path is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)


class RealDecompiler(Decompiler):
    """Decompiler backed by an external executable.

    Example:
        decompiler = RealDecompiler(Path("scripts/fernflower.sh"))
        if not decompiler.decompile(jar, out_dir):
            ...
    """

    def __init__(self, executable: Path) -> None:
        self._executable = executable

    @property
    def executable(self) -> Path:
        return self._executable

    def decompile(self, jar_path: Path, out_dir: Path) -> bool:
        """Run the executable and report whether it exited with status 0.

        A decompiler that cannot be started counts as a failed run.
        """
        cmd = [
            str(self._executable.absolute()),
            str(jar_path.absolute()),
            str(out_dir.absolute()),
        ]
        logger.debug("Running decompiler: %s", " ".join(cmd))

        try:
            result = subprocess.run(cmd, check=False)
        except OSError as e:
            logger.warning("Could not start decompiler %s: %s", self._executable, e)
            return False

        if result.returncode != 0:
            logger.debug("Decompiler exited with status %d for %s", result.returncode, jar_path)
            return False
        return True
