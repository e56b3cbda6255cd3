"""Resolve the fetchable download URL of a run's preview artifact."""

from __future__ import annotations

from preview_pages.github_access.host_protocol import GitHubRequestError, PreviewBuildHost

from .collection_contracts import ArtifactExpiredError, ArtifactNotFoundError
from .unit_logging import UnitLogAdapter

ARTIFACT_EXPIRED_STATUS = 410


def resolve_artifact_url(
    host: PreviewBuildHost,
    repo: str,
    run_id: int,
    artifact_name: str,
    log: UnitLogAdapter,
) -> str:
    artifacts = host.list_run_artifacts(repo, run_id)
    artifact = next((item for item in artifacts if item.get("name") == artifact_name), None)
    if artifact is None:
        raise ArtifactNotFoundError(f'Artifact "{artifact_name}" not found in run {run_id}')

    archive_url = artifact.get("archive_download_url")
    if not archive_url:
        raise ArtifactNotFoundError(
            f'Artifact "{artifact_name}" does not have a download URL in run {run_id}'
        )
    log.info("Fetching artifact URL from %s", archive_url)

    try:
        return host.resolve_artifact_download_url(repo, int(artifact["id"]))
    except GitHubRequestError as exc:
        if exc.status_code == ARTIFACT_EXPIRED_STATUS:
            log.error("Artifact is expired")
            raise ArtifactExpiredError(
                f'Artifact "{artifact_name}" in run {run_id} is expired'
            ) from exc
        raise
