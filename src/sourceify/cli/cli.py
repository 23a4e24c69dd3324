import logging
import os
from pathlib import Path

import click

from sourceify import __version__
from sourceify.cli.output import (
    error_output,
    machine_output,
    print_run_summary,
    report_outcome,
    user_output,
)
from sourceify.core.artifact import Artifact
from sourceify.core.context import SourceifyContext, create_context
from sourceify.core.runner import find_pending, run_repository
from sourceify.ops.decompiler_real import is_executable

logger = logging.getLogger(__name__)

# Enable debug logging if SOURCEIFY_DEBUG environment variable is set
if os.getenv("SOURCEIFY_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

EXIT_USAGE = 1
EXIT_NOT_A_DIRECTORY = 2
EXIT_NOT_EXECUTABLE = 3


def _report_start(artifact: Artifact) -> None:
    user_output(f"Processing: {artifact}")


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="sourceify")
@click.argument("args", nargs=-1, metavar="REPOSITORY_ROOT DECOMPILER")
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Number of artifacts to decompile in parallel (default: from config).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="List artifacts missing a sources jar without running the decompiler.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file to use instead of ~/.sourceify/config.toml.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    args: tuple[str, ...],
    jobs: int | None,
    dry_run: bool,
    config_path: Path | None,
) -> None:
    """Generate sources jars for a local Maven repository by decompiling its jars.

    Every jar below REPOSITORY_ROOT that has no companion -sources jar is
    passed to DECOMPILER as `DECOMPILER <jar> <output dir>`. The result is
    published as <artifactId>-<version>[-<build>]-sources.jar next to it,
    carrying a sourceify-decompiled marker entry.
    """
    if len(args) != 2:
        user_output("Usage: sourceify <maven repo root> <decompiler>")
        raise SystemExit(EXIT_USAGE)

    base = Path(args[0])
    if not base.is_dir():
        error_output("The given root is not a directory!")
        raise SystemExit(EXIT_NOT_A_DIRECTORY)

    decompiler_path = Path(args[1])
    if not is_executable(decompiler_path):
        error_output("The given decompiler is not executable!")
        raise SystemExit(EXIT_NOT_EXECUTABLE)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context(
                decompiler_path=decompiler_path, config_path=config_path, dry_run=dry_run
            )
        except (FileNotFoundError, ValueError) as e:
            error_output(str(e))
            raise SystemExit(1) from None
    sctx: SourceifyContext = ctx.obj
    dry_run = dry_run or sctx.dry_run

    max_workers = jobs if jobs is not None else sctx.global_config.max_workers
    logger.debug("Repository root=%s, max_workers=%d, dry_run=%s", base, max_workers, dry_run)

    try:
        if dry_run:
            summary = find_pending(base)
            for artifact in summary.pending:
                machine_output(str(artifact.path))
        else:
            summary = run_repository(
                base,
                sctx.decompiler,
                max_workers=max_workers,
                workspace_root=sctx.global_config.workspace_root,
                on_start=_report_start,
                on_outcome=report_outcome,
            )
    except OSError as e:
        error_output(f"Failed to list repository {base}: {e}")
        raise SystemExit(1) from None

    print_run_summary(summary, dry_run=dry_run)


def main() -> None:
    """CLI entry point used by the `sourceify` console script."""
    cli()
