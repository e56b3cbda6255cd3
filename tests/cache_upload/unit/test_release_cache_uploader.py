"""Cache release upload tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from preview_pages.artifact_collection.collection_contracts import DownloadOutcome
from preview_pages.cache_upload.release_cache_uploader import (
    CacheUploadError,
    UploadSummary,
    ensure_cache_release,
    upload_cached_artifacts,
)
from preview_pages.github_access.host_protocol import GitHubRequestError
from preview_pages.sources.source_models import BranchSource, PullRequestSource
from support.fake_host import CACHE_REPO, CACHE_TAG, FakeGitHubHost, make_settings


def _cache_entry(
    cache_dir: Path, repo_key: str, outcome: DownloadOutcome, *, with_zip: bool = True
) -> None:
    repo_dir = cache_dir / repo_key
    repo_dir.mkdir(parents=True, exist_ok=True)
    stem = outcome.path.rsplit("/", 1)[-1]
    (repo_dir / f"{stem}.json").write_text(json.dumps(outcome.to_json()), encoding="utf-8")
    if with_zip:
        (repo_dir / f"{stem}.zip").write_bytes(f"zip-{stem}".encode("utf-8"))


def test_missing_release_is_created_as_prerelease(tmp_path: Path) -> None:
    host = FakeGitHubHost()
    cache_store = make_settings(tmp_path).cache_store

    release = ensure_cache_release(host, cache_store)

    assert release["prerelease"] is True
    assert release["name"] == "Preview Pages Cache"
    assert host.call_count("create_release") == 1
    assert host.releases[(CACHE_REPO, CACHE_TAG)] is release


def test_existing_release_is_reused(tmp_path: Path) -> None:
    host = FakeGitHubHost()
    existing = host.add_cache_release([])

    assert ensure_cache_release(host, make_settings(tmp_path).cache_store) is existing
    assert host.call_count("create_release") == 0


def test_release_lookup_errors_other_than_not_found_propagate(tmp_path: Path) -> None:
    host = FakeGitHubHost()
    host.release_error = GitHubRequestError(401, "Bad credentials")

    with pytest.raises(GitHubRequestError):
        ensure_cache_release(host, make_settings(tmp_path).cache_store)


def test_uploads_new_archives_and_skips_existing_assets(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    cache_dir = settings.cache_download_dir
    assert cache_dir is not None
    main_outcome = DownloadOutcome(BranchSource("main"), False, "editor/branch-main", 5)
    pr_outcome = DownloadOutcome(PullRequestSource(3, "s", "o/r"), False, "editor/pr-3", 6)
    _cache_entry(cache_dir, "editor", main_outcome)
    _cache_entry(cache_dir, "editor", pr_outcome)
    host = FakeGitHubHost()
    host.add_cache_release(
        [{"name": "branch-main-5-v1.zip", "browser_download_url": "https://cache/main"}]
    )

    summary = upload_cached_artifacts(host, settings.cache_store, cache_dir)

    assert summary == UploadSummary(uploaded=1, skipped=1)
    uploads = [args for name, args in host.calls if name == "upload_release_asset"]
    assert uploads == [(77, "pr-3-6-v1.zip", b"zip-pr-3")]


def test_missing_cache_directory_uploads_nothing(tmp_path: Path) -> None:
    host = FakeGitHubHost()

    summary = upload_cached_artifacts(
        host, make_settings(tmp_path).cache_store, tmp_path / "missing"
    )

    assert summary == UploadSummary(uploaded=0, skipped=0)
    assert host.call_count("upload_release_asset") == 0


def test_sidecar_without_archive_is_an_error(tmp_path: Path) -> None:
    cache_dir = tmp_path / "cached"
    _cache_entry(
        cache_dir,
        "blog",
        DownloadOutcome(BranchSource("main"), False, "blog/branch-main", 1),
        with_zip=False,
    )
    host = FakeGitHubHost()

    with pytest.raises(CacheUploadError, match="Cached archive missing"):
        upload_cached_artifacts(host, make_settings(tmp_path).cache_store, cache_dir)
