"""Repository-wide run: discovery feeding a bounded worker pool.

Each candidate artifact becomes one independent task. At most
``2 * max_workers`` tasks are in flight, so walking a very large repository
never queues every artifact up front.
"""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ALL_COMPLETED, FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path

from sourceify.core.artifact import Artifact, ArtifactKind
from sourceify.core.discovery import enumerate_artifacts
from sourceify.core.synthesizer import (
    SynthesisError,
    SynthesisOutcome,
    SynthesisSkipped,
    SynthesisSuccess,
    synthesize_sources,
)
from sourceify.ops.decompiler import Decompiler

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Aggregated outcomes of a repository run."""

    created: list[SynthesisSuccess] = field(default_factory=list)
    skipped: list[SynthesisSkipped] = field(default_factory=list)
    failed: list[SynthesisError] = field(default_factory=list)
    pending: list[Artifact] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed

    def record(self, outcome: SynthesisOutcome) -> None:
        if isinstance(outcome, SynthesisSuccess):
            self.created.append(outcome)
        elif isinstance(outcome, SynthesisSkipped):
            self.skipped.append(outcome)
        else:
            self.failed.append(outcome)


def _drain(
    in_flight: set[Future[SynthesisOutcome]],
    summary: RunSummary,
    on_outcome: Callable[[SynthesisOutcome], None],
    *,
    return_when: str,
) -> set[Future[SynthesisOutcome]]:
    done, not_done = wait(in_flight, return_when=return_when)
    for future in done:
        outcome = future.result()
        summary.record(outcome)
        on_outcome(outcome)
    return not_done


def process_artifacts(
    artifacts: Iterable[Artifact],
    decompiler: Decompiler,
    *,
    max_workers: int,
    workspace_root: Path | None = None,
    on_start: Callable[[Artifact], None] = lambda artifact: None,
    on_outcome: Callable[[SynthesisOutcome], None] = lambda outcome: None,
) -> RunSummary:
    """Synthesize sources for every artifact on a bounded thread pool.

    Args:
        artifacts: Code artifacts to process, consumed lazily
        decompiler: Decompiler ops implementation shared by all tasks
        max_workers: Pool size (>= 1)
        workspace_root: Parent directory for workspaces
        on_start: Called from the worker thread before an artifact is decompiled
        on_outcome: Called on the submitting thread as each task completes

    Returns:
        RunSummary with one recorded outcome per artifact
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    def task(artifact: Artifact) -> SynthesisOutcome:
        try:
            on_start(artifact)
            return synthesize_sources(
                artifact, decompiler, workspace_root=workspace_root
            )
        except Exception as e:
            # One broken artifact must not abort the rest of the run
            logger.exception("Unexpected failure processing %s", artifact)
            return SynthesisError(
                artifact=artifact,
                error_type="unexpected_error",
                message=f"Unexpected failure processing {artifact}: {e}",
            )

    summary = RunSummary()
    window = 2 * max_workers
    in_flight: set[Future[SynthesisOutcome]] = set()

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="sourceify") as pool:
        for artifact in artifacts:
            if len(in_flight) >= window:
                in_flight = _drain(
                    in_flight, summary, on_outcome, return_when=FIRST_COMPLETED
                )
            in_flight.add(pool.submit(task, artifact))
        if in_flight:
            _drain(in_flight, summary, on_outcome, return_when=ALL_COMPLETED)

    logger.debug(
        "Run finished: created=%d skipped=%d failed=%d",
        len(summary.created),
        len(summary.skipped),
        len(summary.failed),
    )
    return summary


def find_pending(base: Path) -> RunSummary:
    """Collect the code artifacts whose sources jar is missing, without decompiling."""
    summary = RunSummary()
    for artifact in enumerate_artifacts(base):
        if not artifact.related(ArtifactKind.SOURCE).path.exists():
            summary.pending.append(artifact)
    return summary


def run_repository(
    base: Path,
    decompiler: Decompiler,
    *,
    max_workers: int,
    workspace_root: Path | None = None,
    on_start: Callable[[Artifact], None] = lambda artifact: None,
    on_outcome: Callable[[SynthesisOutcome], None] = lambda outcome: None,
) -> RunSummary:
    """Synthesize missing sources jars for a whole repository.

    Raises:
        OSError: If the repository tree cannot be listed
    """
    return process_artifacts(
        enumerate_artifacts(base),
        decompiler,
        max_workers=max_workers,
        workspace_root=workspace_root,
        on_start=on_start,
        on_outcome=on_outcome,
    )
