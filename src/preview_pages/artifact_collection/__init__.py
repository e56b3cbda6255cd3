"""Artifact collection exports."""

from .archive_download import ArchiveDownloader
from .cache_lookup import CachedArtifactIndex
from .collection_contracts import (
    ArchiveDownloadError,
    ArtifactCollectionError,
    ArtifactExpiredError,
    ArtifactNotFoundError,
    CheckRunReference,
    CollectionRequest,
    CollectionSummary,
    DownloadOutcome,
    DownloadResult,
    JobFailedError,
    JobTimeoutError,
    MalformedCheckError,
    NoArtifactsCollectedError,
)
from .collection_use_case import (
    CollectionContext,
    collect_all_artifacts,
    collect_artifact,
    collect_repository_artifacts,
    execute_collection_run,
)
from .completion_waiter import JobState, JobWaitOutcome, PollingGate, wait_for_job_completion
from .download_manifest import (
    MANIFEST_FILENAME,
    read_download_manifest,
    read_download_sidecar,
    write_download_manifest,
)

__all__ = [
    "ArchiveDownloadError",
    "ArchiveDownloader",
    "ArtifactCollectionError",
    "ArtifactExpiredError",
    "ArtifactNotFoundError",
    "CachedArtifactIndex",
    "CheckRunReference",
    "CollectionContext",
    "CollectionRequest",
    "CollectionSummary",
    "DownloadOutcome",
    "DownloadResult",
    "JobFailedError",
    "JobState",
    "JobTimeoutError",
    "JobWaitOutcome",
    "MANIFEST_FILENAME",
    "MalformedCheckError",
    "NoArtifactsCollectedError",
    "PollingGate",
    "collect_all_artifacts",
    "collect_artifact",
    "collect_repository_artifacts",
    "execute_collection_run",
    "read_download_manifest",
    "read_download_sidecar",
    "wait_for_job_completion",
    "write_download_manifest",
]
