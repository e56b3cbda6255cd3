"""Read and write the ``downloads.json`` manifest and per-source sidecars."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from .collection_contracts import DownloadOutcome, DownloadResult

MANIFEST_FILENAME = "downloads.json"


def write_download_manifest(results: Mapping[str, DownloadResult], destination_dir: Path) -> Path:
    """Replace the manifest with the results of the current pass."""
    destination_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = destination_dir / MANIFEST_FILENAME
    payload = {repo_key: result.to_json() for repo_key, result in results.items()}
    manifest_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return manifest_path


def read_download_manifest(manifest_path: Path) -> dict[str, DownloadResult]:
    payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError(f"Manifest root must be an object: {manifest_path}")
    return {repo_key: DownloadResult.from_json(item) for repo_key, item in payload.items()}


def read_download_sidecar(info_path: Path) -> DownloadOutcome:
    return DownloadOutcome.from_json(json.loads(info_path.read_text(encoding="utf-8")))
