"""Collection pass use-case service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from preview_pages.configuration.runtime_settings import CollectorSettings, TargetRepository
from preview_pages.github_access.host_protocol import PreviewBuildHost
from preview_pages.sources.source_models import Source, create_source_key
from preview_pages.sources.target_enumeration import fetch_targets

from .archive_download import ArchiveDownloader, HttpSession
from .artifact_urls import resolve_artifact_url
from .cache_lookup import CachedArtifactIndex
from .collection_contracts import (
    CollectionRequest,
    CollectionSummary,
    DownloadOutcome,
    DownloadResult,
    NoArtifactsCollectedError,
)
from .completion_waiter import PollingGate, ensure_job_succeeded, wait_for_job_completion
from .download_manifest import write_download_manifest
from .status_checks import resolve_check_run
from .unit_logging import COLLECT_LOGGER_NAME, unit_logger

_LOGGER = logging.getLogger(COLLECT_LOGGER_NAME)


@dataclass(frozen=True)
class CollectionContext:  # pylint: disable=too-many-instance-attributes
    """Collaborators shared by every unit of one pass."""

    host: PreviewBuildHost
    settings: CollectorSettings
    gate: PollingGate
    cache_index: CachedArtifactIndex
    downloader: ArchiveDownloader
    fetch_url_only: bool = False
    sleep: Callable[[float], None] = time.sleep


def execute_collection_run(
    request: CollectionRequest,
    settings: CollectorSettings,
    *,
    host: PreviewBuildHost,
    session: HttpSession,
    sleep: Callable[[float], None] = time.sleep,
) -> CollectionSummary:
    """Run one collection pass over every configured repository and write the manifest."""
    if request.fetch_url_only:
        _LOGGER.info("--fetch-url-only option is enabled.")
    context = CollectionContext(
        host=host,
        settings=settings,
        gate=PollingGate(settings.polling.parallelism),
        cache_index=CachedArtifactIndex(host, settings.cache_store),
        downloader=ArchiveDownloader(session, settings.cache_download_dir),
        fetch_url_only=request.fetch_url_only,
        sleep=sleep,
    )
    summary = collect_all_artifacts(context)
    if summary.total_successful == 0:
        raise NoArtifactsCollectedError("No artifacts were collected.")

    manifest_path = write_download_manifest(summary.results, settings.destination_dir)
    _LOGGER.info("Wrote %s", manifest_path)
    return summary


def collect_all_artifacts(context: CollectionContext) -> CollectionSummary:
    """Collect repositories one after another; units inside a repository run concurrently."""
    results: dict[str, DownloadResult] = {}
    for target in context.settings.targets:
        _LOGGER.info("Collecting artifacts for %s...", target.repo)
        results[target.key] = collect_repository_artifacts(context, target)
    return CollectionSummary(results=results)


def collect_repository_artifacts(
    context: CollectionContext, target: TargetRepository
) -> DownloadResult:
    sources = fetch_targets(context.host, target, context.settings)
    if not sources:
        return DownloadResult(repo_key=target.key, data=(), num_targets=0)

    outcomes: list[DownloadOutcome] = []
    with ThreadPoolExecutor(max_workers=len(sources)) as executor:
        futures = [
            executor.submit(collect_artifact, context, target, source) for source in sources
        ]
        for future in as_completed(futures):
            outcome = future.result()
            if outcome is not None:
                outcomes.append(outcome)
    return DownloadResult(repo_key=target.key, data=tuple(outcomes), num_targets=len(sources))


def collect_artifact(
    context: CollectionContext, target: TargetRepository, source: Source
) -> DownloadOutcome | None:
    """Drive one source through check lookup, wait, URL resolution and download.

    Any failure is logged with the source's label and reported as ``None``.
    """
    log = unit_logger(target.key, source)
    try:
        reference = resolve_check_run(
            context.host, target.repo, source, context.settings.check_name, log
        )
        if reference is None:
            return None
        log.info("Job ID: %s, Run ID: %s", reference.job_id, reference.run_id)

        polling = context.settings.polling
        wait_outcome = wait_for_job_completion(
            context.host,
            target.repo,
            reference.job_id,
            context.gate,
            log,
            max_attempts=polling.max_attempts,
            interval_seconds=polling.interval_seconds,
            sleep=context.sleep,
        )
        ensure_job_succeeded(wait_outcome, reference.job_id)

        cached_url = context.cache_index.lookup(source, reference.run_id)
        download_url = cached_url or resolve_artifact_url(
            context.host, target.repo, reference.run_id, context.settings.artifact_name, log
        )
        outcome = DownloadOutcome(
            source=source,
            cached=cached_url is not None,
            path=f"{target.key}/{create_source_key(source)}",
            run_id=reference.run_id,
        )

        if context.fetch_url_only:
            log.info("Download skipped: %s", download_url)
        else:
            context.downloader.download_and_extract(
                target.key, outcome, download_url, context.settings.destination_dir, log
            )
            log.info("Done.")
        return outcome
    except Exception as exc:  # pylint: disable=broad-exception-caught
        log.error("Failed to process: %s", exc)
        log.debug("Failure details", exc_info=True)
        return None
