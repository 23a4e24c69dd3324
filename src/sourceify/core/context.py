"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from sourceify.core.global_config import GlobalConfig, load_global_config
from sourceify.ops.decompiler import Decompiler
from sourceify.ops.decompiler_real import RealDecompiler


@dataclass(frozen=True)
class SourceifyContext:
    """Immutable context holding all dependencies for a sourceify run.

    Created at CLI entry point and threaded through the application.
    Tests pass their own instance to the CLI via ``obj=``.
    """

    decompiler: Decompiler
    global_config: GlobalConfig
    dry_run: bool

    @staticmethod
    def for_test(
        decompiler: Decompiler,
        *,
        global_config: GlobalConfig | None = None,
        dry_run: bool = False,
    ) -> "SourceifyContext":
        """Build a context around a fake decompiler with default config."""
        return SourceifyContext(
            decompiler=decompiler,
            global_config=global_config or GlobalConfig(max_workers=2, workspace_root=None),
            dry_run=dry_run,
        )


def create_context(
    *, decompiler_path: Path, config_path: Path | None, dry_run: bool
) -> SourceifyContext:
    """Create production context with the real decompiler.

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist
        ValueError: If the config file is malformed
    """
    return SourceifyContext(
        decompiler=RealDecompiler(decompiler_path),
        global_config=load_global_config(config_path),
        dry_run=dry_run,
    )
