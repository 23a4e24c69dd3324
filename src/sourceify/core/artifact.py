"""Artifact coordinates inferred from repository file paths.

A repository stores every artifact at

    <base>/<groupId as directories>/<artifactId>/<version>/<filename>

where the filename is

    <artifactId>-<version>[-<build>][-sources|-javadoc].<extension>

classify() turns such a path back into an Artifact, and Artifact.related()
performs the inverse naming transform for a sibling of another kind.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

ARCHIVE_EXTENSION = "jar"
SOURCES_SUFFIX = "sources"
JAVADOC_SUFFIX = "javadoc"
SNAPSHOT_SUFFIX = "-SNAPSHOT"


class ArtifactKind(Enum):
    """What an artifact file contains."""

    CODE = "CODE"
    SOURCE = "SOURCE"
    JAVADOC = "JAVADOC"


_KIND_SUFFIXES: dict[ArtifactKind, str] = {
    ArtifactKind.CODE: "",
    ArtifactKind.SOURCE: "-" + SOURCES_SUFFIX,
    ArtifactKind.JAVADOC: "-" + JAVADOC_SUFFIX,
}


@dataclass(frozen=True)
class Coordinate:
    """groupId/artifactId/version[/build] tuple identifying an artifact family.

    build is None unless the filename carries a classifier beyond the
    standard sources/javadoc suffix (e.g. "jdk11").
    """

    group_id: str
    artifact_id: str
    version: str
    build: str | None = None

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(SNAPSHOT_SUFFIX)

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.version]
        if self.build is not None:
            parts.append(self.build)
        return ":".join(parts)


@dataclass(frozen=True)
class Artifact:
    """A concrete artifact file: coordinate, kind and location on disk."""

    coordinate: Coordinate
    kind: ArtifactKind
    path: Path
    extension: str

    @property
    def is_snapshot(self) -> bool:
        return self.coordinate.is_snapshot

    def related(self, kind: ArtifactKind) -> "Artifact":
        """Derive the sibling artifact of the given kind.

        The sibling lives in the same version directory and shares the
        coordinate and extension. Asking for the artifact's own kind returns
        the artifact itself.

        Example:
            foo-1.0.0-jdk11.jar -> related(SOURCE) -> foo-1.0.0-jdk11-sources.jar
        """
        if kind == self.kind:
            return self

        coordinate = self.coordinate
        build = "" if coordinate.build is None else "-" + coordinate.build
        filename = (
            f"{coordinate.artifact_id}-{coordinate.version}{build}"
            f"{_KIND_SUFFIXES[kind]}.{self.extension}"
        )
        return Artifact(
            coordinate=coordinate,
            kind=kind,
            path=self.path.parent / filename,
            extension=self.extension,
        )

    def __str__(self) -> str:
        return f"{self.coordinate}:{self.kind.value}"


def get_extension(path: Path) -> str:
    """Return the text after the last dot of the filename, or "" if none."""
    name = path.name
    index = name.rfind(".")
    if index == -1:
        return ""
    return name[index + 1 :]


def _classify_rest(rest: str) -> tuple[ArtifactKind, str | None]:
    sources_tail = "-" + SOURCES_SUFFIX
    javadoc_tail = "-" + JAVADOC_SUFFIX

    if rest.endswith(sources_tail) and len(rest) > len(sources_tail):
        return ArtifactKind.SOURCE, rest[: -len(sources_tail)]
    if rest.endswith(javadoc_tail) and len(rest) > len(javadoc_tail):
        return ArtifactKind.JAVADOC, rest[: -len(javadoc_tail)]
    if rest == SOURCES_SUFFIX:
        return ArtifactKind.SOURCE, None
    if rest == JAVADOC_SUFFIX:
        return ArtifactKind.JAVADOC, None
    return ArtifactKind.CODE, rest or None


def classify(base: Path, file: Path) -> Artifact | None:
    """Infer the artifact stored at file, relative to the repository base.

    Returns None when the file is not a jar or does not sit deep enough
    below base to carry an artifactId and version directory.
    """
    extension = get_extension(file)
    if extension.lower() != ARCHIVE_EXTENSION:
        return None

    if not file.is_relative_to(base):
        return None
    relative = file.relative_to(base)
    # artifactId + version + filename, group segments may be empty
    if len(relative.parts) < 3:
        return None

    version_dir = file.parent
    artifact_dir = version_dir.parent
    version = version_dir.name
    artifact_id = artifact_dir.name
    group_id = ".".join(artifact_dir.parent.relative_to(base).parts)

    filename = file.name
    prefix_length = len(f"{artifact_id}-{version}-")
    suffix_length = len(extension) + 1
    if prefix_length + suffix_length >= len(filename):
        rest = ""
    else:
        rest = filename[prefix_length : len(filename) - suffix_length]

    kind, build = _classify_rest(rest)
    return Artifact(
        coordinate=Coordinate(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            build=build,
        ),
        kind=kind,
        path=file,
        extension=extension,
    )
