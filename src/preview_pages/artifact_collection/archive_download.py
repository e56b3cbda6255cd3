"""Artifact archive download and extraction service."""

from __future__ import annotations

import json
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import IO, Protocol

from preview_pages.sources.source_models import create_source_key

from .collection_contracts import ArchiveDownloadError, DownloadOutcome
from .unit_logging import UnitLogAdapter

DOWNLOAD_TIMEOUT_SECONDS = 300
CHUNK_SIZE = 1024 * 1024


class HttpSession(Protocol):  # pylint: disable=too-few-public-methods
    """Subset of ``requests.Session`` used for plain archive downloads."""

    def get(self, url: str, **kwargs): ...


class ArchiveDownloader:
    """Stream artifact zips to the local cache tree and extract them for hosting.

    With ``cache_download_dir`` set, the raw zip and a JSON sidecar describing
    the outcome are kept at ``{cache}/{repo}/{sourceKey}.zip|json`` before
    extraction starts. Without it, the archive is spooled to a temporary file.
    """

    def __init__(self, session: HttpSession, cache_download_dir: Path | None) -> None:
        self._session = session
        self._cache_download_dir = cache_download_dir

    def archive_path(self, repo_key: str, outcome: DownloadOutcome) -> Path | None:
        if self._cache_download_dir is None:
            return None
        return self._cache_download_dir / repo_key / f"{create_source_key(outcome.source)}.zip"

    def info_path(self, repo_key: str, outcome: DownloadOutcome) -> Path | None:
        if self._cache_download_dir is None:
            return None
        return self._cache_download_dir / repo_key / f"{create_source_key(outcome.source)}.json"

    def download_and_extract(
        self,
        repo_key: str,
        outcome: DownloadOutcome,
        url: str,
        destination_dir: Path,
        log: UnitLogAdapter,
    ) -> Path:
        """Download ``url`` and extract it to ``destination_dir / outcome.path``."""
        output_dir = destination_dir / outcome.path
        archive_path = self.archive_path(repo_key, outcome)
        info_path = self.info_path(repo_key, outcome)

        if archive_path is None or info_path is None:
            with tempfile.TemporaryFile() as spool:
                self._download(url, spool, log)
                spool.seek(0)
                self._extract(spool, output_dir, log)
        else:
            archive_path.parent.mkdir(parents=True, exist_ok=True)
            log.info("Downloading artifact to %s", archive_path)
            with archive_path.open("wb") as archive_file:
                self._download(url, archive_file, log)
            log.info("Writing download info to %s", info_path)
            info_path.write_text(json.dumps(outcome.to_json(), indent=2), encoding="utf-8")
            with archive_path.open("rb") as archive_file:
                self._extract(archive_file, output_dir, log)

        log.info("Downloaded and extracted artifact to %s", output_dir)
        return output_dir

    def _download(self, url: str, target: IO[bytes], log: UnitLogAdapter) -> None:
        log.info("Downloading artifact from %s", url)
        with self._session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS) as response:
            if not response.ok:
                raise ArchiveDownloadError(
                    f"Failed to download artifact: {response.status_code} {response.reason}"
                )
            written = 0
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    target.write(chunk)
                    written += len(chunk)
        if written == 0:
            raise ArchiveDownloadError("Response body is empty")

    def _extract(self, archive: IO[bytes], output_dir: Path, log: UnitLogAdapter) -> None:
        log.info("Extracting artifact to %s", output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        try:
            with zipfile.ZipFile(archive) as zip_file:
                for member in zip_file.infolist():
                    _extract_member(zip_file, member, output_dir)
        except zipfile.BadZipFile as exc:
            raise ArchiveDownloadError(f"Downloaded artifact is not a zip archive: {exc}") from exc


def _extract_member(zip_file: zipfile.ZipFile, member: zipfile.ZipInfo, output_dir: Path) -> None:
    root = output_dir.resolve()
    target = (root / member.filename).resolve()
    if not target.is_relative_to(root):
        raise ArchiveDownloadError(f"Archive member escapes destination: {member.filename}")
    if member.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    with zip_file.open(member) as source, target.open("wb") as destination:
        shutil.copyfileobj(source, destination)
