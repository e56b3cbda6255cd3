"""Contract of the source-control host used by collection, caching and comments."""

from __future__ import annotations

from typing import Any, Protocol

JsonObject = dict[str, Any]


class GitHubRequestError(Exception):
    """Raised when a GitHub API request fails with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"GitHub request failed ({status_code}): {message}")
        self.status_code = status_code


class PreviewBuildHost(Protocol):
    """Operations the collector needs from GitHub, keyed by ``owner/name`` repos."""

    def list_branches(self, repo: str) -> list[JsonObject]: ...

    def list_open_pull_requests(self, repo: str) -> list[JsonObject]: ...

    def list_check_runs(self, repo: str, ref: str) -> list[JsonObject]: ...

    def get_job(self, repo: str, job_id: int) -> JsonObject: ...

    def list_run_artifacts(self, repo: str, run_id: int) -> list[JsonObject]: ...

    def resolve_artifact_download_url(self, repo: str, artifact_id: int) -> str: ...

    def get_release_by_tag(self, repo: str, tag: str) -> JsonObject: ...

    def create_release(
        self, repo: str, *, tag: str, name: str, body: str, prerelease: bool
    ) -> JsonObject: ...

    def upload_release_asset(self, release: JsonObject, name: str, data: bytes) -> JsonObject: ...

    def list_issue_comments(self, repo: str, issue_number: int) -> list[JsonObject]: ...

    def create_issue_comment(self, repo: str, issue_number: int, body: str) -> JsonObject: ...

    def update_issue_comment(self, repo: str, comment_id: int, body: str) -> JsonObject: ...
