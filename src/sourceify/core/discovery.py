"""Repository walk yielding the code artifacts eligible for decompilation."""

import os
from collections.abc import Iterator
from pathlib import Path

from sourceify.core.artifact import Artifact, ArtifactKind, classify


def _raise_walk_error(error: OSError) -> None:
    raise error


def iter_repository_files(base: Path) -> Iterator[Path]:
    """Yield every regular file below base.

    Raises:
        OSError: If any directory of the tree cannot be listed
    """
    for dirpath, _dirnames, filenames in os.walk(base, onerror=_raise_walk_error):
        directory = Path(dirpath)
        for filename in filenames:
            path = directory / filename
            if path.is_file():
                yield path


def enumerate_artifacts(base: Path) -> Iterator[Artifact]:
    """Lazily yield non-snapshot code artifacts found below base.

    Files that do not classify as artifacts are skipped silently. Each call
    starts a fresh walk; traversal order is whatever the filesystem returns.

    Raises:
        OSError: If the repository tree cannot be listed
    """
    for path in iter_repository_files(base):
        artifact = classify(base, path)
        if artifact is None:
            continue
        if artifact.kind != ArtifactKind.CODE or artifact.is_snapshot:
            continue
        yield artifact
