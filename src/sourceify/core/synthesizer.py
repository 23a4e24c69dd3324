"""Source jar synthesis for a single code artifact.

Pipeline per artifact:
  1. Derive the sibling "-sources" artifact.
  2. Stop if it already exists.
  3. Decompile into a fresh workspace.
  4. Either mark the archive the decompiler emitted (pass-through) or assemble
     one from the decompiled files.
  5. Write the archive to a hidden temporary file next to the destination.
  6. Rename it onto the destination in one step.

The workspace is released on every exit path after it was acquired. Failures
are returned as SynthesisError values instead of raised, so one broken
artifact never aborts the run.
"""

import logging
import os
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from sourceify.core.archive import build_archive, inject_marker
from sourceify.core.artifact import Artifact, ArtifactKind
from sourceify.core.workspace import acquire_workspace, release_workspace
from sourceify.ops.decompiler import Decompiler

logger = logging.getLogger(__name__)

PackagingStrategy = Literal["assembled", "passthrough"]

SynthesisErrorType = Literal[
    "workspace_failed",
    "decompiler_failed",
    "archive_failed",
    "publish_failed",
    "unexpected_error",
]


@dataclass(frozen=True)
class SynthesisSuccess:
    """A source jar was published at destination."""

    artifact: Artifact
    destination: Path
    strategy: PackagingStrategy
    success: bool = True


@dataclass(frozen=True)
class SynthesisSkipped:
    """The source jar already existed; nothing was done."""

    artifact: Artifact
    destination: Path
    reason: Literal["already_exists"] = "already_exists"
    success: bool = True


@dataclass(frozen=True)
class SynthesisError:
    """Synthesis failed; the destination was not touched."""

    artifact: Artifact
    error_type: SynthesisErrorType
    message: str
    success: bool = False


SynthesisOutcome = SynthesisSuccess | SynthesisSkipped | SynthesisError


def temporary_publish_path(destination: Path) -> Path:
    """Hidden staging file in the destination's directory (same filesystem)."""
    return destination.parent / f".{destination.name}.tmp"


def _stage_archive(
    code: Artifact, work_dir: Path, staging: Path
) -> PackagingStrategy:
    emitted = work_dir / code.path.name
    if emitted.is_file():
        logger.debug("Decompiler emitted %s, passing it through", emitted)
        inject_marker(emitted)
        shutil.move(emitted, staging)
        return "passthrough"

    build_archive(work_dir, staging)
    return "assembled"


# Filesystem, encoding (non-UTF-8 names) and zip format failures while staging
_ARCHIVE_ERRORS = (
    OSError,
    ValueError,
    RuntimeError,
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
)


def _publish(
    code: Artifact,
    destination: Path,
    work_dir: Path,
    decompiler: Decompiler,
) -> SynthesisOutcome:
    try:
        decompiled = decompiler.decompile(code.path, work_dir)
    except Exception as e:
        logger.warning("Decompiler raised for %s: %s", code, e)
        return SynthesisError(
            artifact=code,
            error_type="decompiler_failed",
            message=f"Decompiler raised for {code}: {e}",
        )
    if not decompiled:
        return SynthesisError(
            artifact=code,
            error_type="decompiler_failed",
            message=f"Decompiler failed for {code}",
        )

    staging = temporary_publish_path(destination)
    try:
        try:
            strategy = _stage_archive(code, work_dir, staging)
        except _ARCHIVE_ERRORS as e:
            return SynthesisError(
                artifact=code,
                error_type="archive_failed",
                message=f"Failed to build source archive {staging}: {e}",
            )

        try:
            os.replace(staging, destination)
        except OSError as e:
            return SynthesisError(
                artifact=code,
                error_type="publish_failed",
                message=f"Failed to move {staging} to {destination}: {e}",
            )
    finally:
        # Nothing is left there after a successful replace
        staging.unlink(missing_ok=True)

    logger.debug("Published %s (%s)", destination, strategy)
    return SynthesisSuccess(artifact=code, destination=destination, strategy=strategy)


def synthesize_sources(
    code: Artifact,
    decompiler: Decompiler,
    *,
    workspace_root: Path | None = None,
) -> SynthesisOutcome:
    """Decompile a code artifact and publish its sources jar next to it.

    Calling this twice for the same artifact decompiles at most once: the
    second call finds the published jar and returns SynthesisSkipped after a
    single existence check.

    Args:
        code: Code artifact to decompile
        decompiler: Decompiler ops implementation
        workspace_root: Parent directory for the temporary workspace
            (system temp dir if None)

    Returns:
        SynthesisSuccess, SynthesisSkipped or SynthesisError
    """
    destination = code.related(ArtifactKind.SOURCE).path
    if destination.exists():
        return SynthesisSkipped(artifact=code, destination=destination)

    try:
        work_dir = acquire_workspace(workspace_root)
    except OSError as e:
        return SynthesisError(
            artifact=code,
            error_type="workspace_failed",
            message=f"Failed to create decompilation workspace: {e}",
        )

    try:
        return _publish(code, destination, work_dir, decompiler)
    finally:
        try:
            release_workspace(work_dir)
        except OSError as e:
            logger.warning("Failed to remove workspace %s: %s", work_dir, e)
