"""Decompiler operations interface.

The decompiler is an opaque external program. This module defines the
contract sourceify relies on, following the ops pattern of ABC-based
dependency injection so tests can substitute an in-memory fake.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Decompiler(ABC):
    """Abstract interface for turning a binary archive into source files."""

    @abstractmethod
    def decompile(self, jar_path: Path, out_dir: Path) -> bool:
        """Decompile jar_path, writing the results into out_dir.

        The decompiler may either write individual source files below
        out_dir or emit a ready archive named like jar_path directly inside
        out_dir.

        Args:
            jar_path: Binary archive to decompile (must exist)
            out_dir: Existing, empty directory to write results into

        Returns:
            True if decompilation succeeded, False otherwise
        """
        ...
