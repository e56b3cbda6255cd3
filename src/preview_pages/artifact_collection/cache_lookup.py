"""Lookup of previously cached artifacts in the cache release."""

from __future__ import annotations

import logging
import threading

from preview_pages.configuration.runtime_settings import CacheStoreSettings
from preview_pages.github_access.host_protocol import (
    GitHubRequestError,
    JsonObject,
    PreviewBuildHost,
)
from preview_pages.sources.source_models import Source, create_cache_file_name

_LOGGER = logging.getLogger("preview_pages.cache")


class CachedArtifactIndex:
    """Memoized listing of the cache release's assets.

    The release is fetched on the first lookup and reused afterwards. A missing
    release means an empty cache.
    """

    def __init__(self, host: PreviewBuildHost, cache_store: CacheStoreSettings) -> None:
        self._host = host
        self._cache_store = cache_store
        self._assets: list[JsonObject] | None = None
        self._lock = threading.Lock()

    def entries(self) -> list[JsonObject]:
        with self._lock:
            if self._assets is None:
                self._assets = self._fetch_assets()
            return self._assets

    def lookup(self, source: Source, run_id: int) -> str | None:
        """Return the cached asset's download URL for this build, if any."""
        cache_file_name = create_cache_file_name(source, run_id)
        for asset in self.entries():
            if asset.get("name") == cache_file_name:
                _LOGGER.info("Found cached artifact for %s", cache_file_name)
                return str(asset["browser_download_url"])
        return None

    def _fetch_assets(self) -> list[JsonObject]:
        try:
            release = self._host.get_release_by_tag(
                self._cache_store.repo, self._cache_store.release_tag
            )
        except GitHubRequestError as exc:
            if exc.status_code == 404:
                _LOGGER.info(
                    "Release %s not found in %s.",
                    self._cache_store.release_tag,
                    self._cache_store.repo,
                )
                return []
            raise
        return list(release.get("assets", []))
