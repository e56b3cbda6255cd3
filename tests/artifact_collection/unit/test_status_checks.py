"""Status-check resolver tests."""

from __future__ import annotations

import logging

import pytest
from preview_pages.artifact_collection.collection_contracts import (
    CheckRunReference,
    MalformedCheckError,
)
from preview_pages.artifact_collection.status_checks import extract_run_id, resolve_check_run
from preview_pages.artifact_collection.unit_logging import unit_logger
from preview_pages.sources.source_models import BranchSource, PullRequestSource
from support.fake_host import CHECK_NAME, FakeGitHubHost

REPO = "example/editor"


@pytest.mark.parametrize(
    ("details_url", "expected"),
    [
        ("https://github.com/o/r/actions/runs/123/job/456", 123),
        ("https://github.com/o/r/actions/runs/987", 987),
        ("https://github.com/o/r/runs/55", 55),
        ("https://example.com/checks/1", None),
        ("https://github.com/o/r/actions/runs/abc", None),
    ],
)
def test_extract_run_id(details_url: str, expected: int | None) -> None:
    assert extract_run_id(details_url) == expected


def test_branch_check_is_looked_up_by_branch_name() -> None:
    host = FakeGitHubHost()
    host.add_branch_build(
        REPO, "main", job_id=10, run_id=20, artifact_id=30, download_url="https://dl/1"
    )
    source = BranchSource("main")

    reference = resolve_check_run(host, REPO, source, CHECK_NAME, unit_logger("editor", source))

    assert reference == CheckRunReference(job_id=10, run_id=20)
    assert ("list_check_runs", (REPO, "main")) in host.calls


def test_pull_request_check_is_looked_up_by_head_sha() -> None:
    host = FakeGitHubHost()
    host.add_pull_request_build(
        REPO, 7, "abc123", job_id=11, run_id=21, artifact_id=31, download_url="https://dl/2"
    )
    source = PullRequestSource(7, "abc123", REPO)

    reference = resolve_check_run(host, REPO, source, CHECK_NAME, unit_logger("editor", source))

    assert reference == CheckRunReference(job_id=11, run_id=21)
    assert ("list_check_runs", (REPO, "abc123")) in host.calls


def test_missing_check_means_no_build(caplog: pytest.LogCaptureFixture) -> None:
    host = FakeGitHubHost()
    host.check_runs[(REPO, "main")] = [{"name": "lint", "id": 1, "details_url": "x"}]
    source = BranchSource("main")

    with caplog.at_level(logging.INFO):
        reference = resolve_check_run(
            host, REPO, source, CHECK_NAME, unit_logger("editor", source)
        )

    assert reference is None
    assert "[Branch main] No build check found" in caplog.text


def test_check_without_details_url_is_malformed() -> None:
    host = FakeGitHubHost()
    host.check_runs[(REPO, "main")] = [{"name": CHECK_NAME, "id": 1, "details_url": None}]
    source = BranchSource("main")

    with pytest.raises(MalformedCheckError, match="details URL"):
        resolve_check_run(host, REPO, source, CHECK_NAME, unit_logger("editor", source))


def test_unparseable_details_url_excludes_unit(caplog: pytest.LogCaptureFixture) -> None:
    host = FakeGitHubHost()
    host.check_runs[(REPO, "main")] = [
        {"name": CHECK_NAME, "id": 1, "details_url": "https://ci.example.com/build/1"}
    ]
    source = BranchSource("main")

    with caplog.at_level(logging.ERROR):
        reference = resolve_check_run(
            host, REPO, source, CHECK_NAME, unit_logger("editor", source)
        )

    assert reference is None
    assert "Failed to extract check run ID" in caplog.text
