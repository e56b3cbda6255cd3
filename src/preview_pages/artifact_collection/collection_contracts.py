"""Artifact collection entities and unit-failure errors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from preview_pages.sources.source_models import Source, source_from_json, source_to_json


class ArtifactCollectionError(Exception):
    """Raised when one preview source cannot be collected."""


class MalformedCheckError(ArtifactCollectionError):
    """Raised when the build check run carries no details URL."""


class JobTimeoutError(ArtifactCollectionError):
    """Raised when a build job does not complete within the polling bound."""


class JobFailedError(ArtifactCollectionError):
    """Raised when a build job completes with a non-success conclusion."""


class ArtifactNotFoundError(ArtifactCollectionError):
    """Raised when a completed run has no usable preview artifact."""


class ArtifactExpiredError(ArtifactCollectionError):
    """Raised when the run's artifact has expired on the provider."""


class ArchiveDownloadError(ArtifactCollectionError):
    """Raised when an artifact archive cannot be downloaded or extracted."""


class NoArtifactsCollectedError(Exception):
    """Raised when a whole pass produced no successful downloads."""


@dataclass(frozen=True)
class CheckRunReference:
    """Job and workflow run identifiers extracted from a build check run."""

    job_id: int
    run_id: int


@dataclass(frozen=True)
class DownloadOutcome:
    """Terminal record of one successfully collected source."""

    source: Source
    cached: bool
    path: str
    run_id: int

    def to_json(self) -> dict[str, Any]:
        return {
            "source": source_to_json(self.source),
            "cached": self.cached,
            "path": self.path,
            "runId": self.run_id,
        }

    @staticmethod
    def from_json(payload: Mapping[str, Any]) -> DownloadOutcome:
        return DownloadOutcome(
            source=source_from_json(payload["source"]),
            cached=bool(payload["cached"]),
            path=str(payload["path"]),
            run_id=int(payload["runId"]),
        )


@dataclass(frozen=True)
class DownloadResult:
    """Per-repository aggregate: successes in completion order plus attempted count."""

    repo_key: str
    data: tuple[DownloadOutcome, ...]
    num_targets: int

    def to_json(self) -> dict[str, Any]:
        return {
            "repoKey": self.repo_key,
            "data": [outcome.to_json() for outcome in self.data],
            "numTargets": self.num_targets,
        }

    @staticmethod
    def from_json(payload: Mapping[str, Any]) -> DownloadResult:
        return DownloadResult(
            repo_key=str(payload["repoKey"]),
            data=tuple(DownloadOutcome.from_json(item) for item in payload.get("data", [])),
            num_targets=int(payload["numTargets"]),
        )


@dataclass(frozen=True)
class CollectionRequest:
    """Input contract for one collection pass."""

    fetch_url_only: bool = False


@dataclass(frozen=True)
class CollectionSummary:
    """Output contract for one collection pass."""

    results: dict[str, DownloadResult] = field(default_factory=dict)

    @property
    def total_successful(self) -> int:
        return sum(len(result.data) for result in self.results.values())

    @property
    def total_targets(self) -> int:
        return sum(result.num_targets for result in self.results.values())

    def summary_lines(self) -> list[str]:
        lines = [
            f"{result.repo_key}: {len(result.data)} successful downloads / "
            f"{result.num_targets} targets"
            for result in self.results.values()
        ]
        lines.append(
            f"Total: {self.total_successful} successful downloads / {self.total_targets} targets"
        )
        return lines
