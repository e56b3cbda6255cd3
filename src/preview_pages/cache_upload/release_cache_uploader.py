"""Upload locally cached artifact zips to the cache release."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from preview_pages.artifact_collection.download_manifest import read_download_sidecar
from preview_pages.configuration.runtime_settings import CacheStoreSettings
from preview_pages.github_access.host_protocol import (
    GitHubRequestError,
    JsonObject,
    PreviewBuildHost,
)
from preview_pages.sources.source_models import create_cache_file_name

_LOGGER = logging.getLogger("preview_pages.cache")

CACHE_RELEASE_BODY = "Release holding the preview-pages cache. Do not edit by hand."


class CacheUploadError(Exception):
    """Raised when a cached artifact cannot be uploaded."""


@dataclass(frozen=True)
class UploadSummary:
    """Counts of uploaded and already-present cache assets."""

    uploaded: int
    skipped: int


def ensure_cache_release(host: PreviewBuildHost, cache_store: CacheStoreSettings) -> JsonObject:
    """Return the cache release, creating it as a prerelease when missing."""
    _LOGGER.info("Checking if release %s exists...", cache_store.release_tag)
    try:
        release = host.get_release_by_tag(cache_store.repo, cache_store.release_tag)
    except GitHubRequestError as exc:
        if exc.status_code != 404:
            raise
        _LOGGER.info("Creating release %s...", cache_store.release_tag)
        release = host.create_release(
            cache_store.repo,
            tag=cache_store.release_tag,
            name=cache_store.release_name,
            body=CACHE_RELEASE_BODY,
            prerelease=True,
        )
        _LOGGER.info("Release %s created.", cache_store.release_tag)
        return release
    _LOGGER.info("Release %s already exists.", cache_store.release_tag)
    return release


def upload_cached_artifacts(
    host: PreviewBuildHost, cache_store: CacheStoreSettings, cache_download_dir: Path
) -> UploadSummary:
    """Upload every ``{repo}/{sourceKey}.zip`` that has a sidecar and is not yet cached."""
    release = ensure_cache_release(host, cache_store)
    existing_names = {asset.get("name") for asset in release.get("assets", [])}
    _LOGGER.info("Uploading artifacts to %s...", cache_store.repo)

    uploaded = 0
    skipped = 0
    if not cache_download_dir.is_dir():
        _LOGGER.info("No cache directory at %s, nothing to upload.", cache_download_dir)
        return UploadSummary(uploaded=0, skipped=0)

    for repo_dir in sorted(path for path in cache_download_dir.iterdir() if path.is_dir()):
        for info_path in sorted(repo_dir.glob("*.json")):
            outcome = read_download_sidecar(info_path)
            cache_file_name = create_cache_file_name(outcome.source, outcome.run_id)
            if cache_file_name in existing_names:
                _LOGGER.info("Asset %s already exists, skipping upload.", cache_file_name)
                skipped += 1
                continue

            zip_path = info_path.with_suffix(".zip")
            if not zip_path.exists():
                raise CacheUploadError(f"Cached archive missing for {info_path}: {zip_path}")
            _LOGGER.info("Uploading %s from %s...", cache_file_name, zip_path)
            host.upload_release_asset(release, cache_file_name, zip_path.read_bytes())
            existing_names.add(cache_file_name)
            uploaded += 1

    return UploadSummary(uploaded=uploaded, skipped=skipped)
