"""Post or refresh preview link comments on pull requests."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from preview_pages.artifact_collection.collection_contracts import DownloadOutcome, DownloadResult
from preview_pages.configuration.runtime_settings import CollectorSettings, TargetRepository
from preview_pages.github_access.host_protocol import JsonObject, PreviewBuildHost
from preview_pages.sources.source_models import BranchSource, PullRequestSource

_LOGGER = logging.getLogger("preview_pages.comments")

COMMENT_MARKER = "<!-- voicevox preview-pages info -->"
# Includes markers written by earlier releases so their comments get updated in place.
COMMENT_MARKERS = (COMMENT_MARKER, "<!-- voiccevox preview-pages info -->")


class CommentAction(str, Enum):
    """What happened to a pull request's preview comment."""

    NOT_A_PULL_REQUEST = "not_a_pull_request"
    NEW = "new"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CommentSummary:
    """Comment counts for one update pass."""

    pull_requests: int
    new_comments: int
    updated_comments: int

    def summary_line(self) -> str:
        return (
            f"Done: {self.new_comments} new comments, {self.updated_comments} updated comments"
            f" / {self.pull_requests} PRs"
        )


def build_deploy_comment(
    target: TargetRepository,
    outcome: DownloadOutcome,
    pull_request: PullRequestSource,
    pages_url: str,
) -> str:
    """Render the comment body linking every configured page of this preview."""
    lines = [":rocket: プレビュー用ページを作成しました :rocket:", ""]
    lines.extend(
        f'- <a href="{pages_url}/preview/{outcome.path}/{link.path}" target="_blank">'
        f"{link.emoji} {link.label}</a>"
        for link in target.links
    )
    short_sha = pull_request.head_sha[:7]
    commit_url = (
        f"https://github.com/{pull_request.head_repo_full_name}/commit/{pull_request.head_sha}"
    )
    lines.extend(
        ["", f"更新時点でのコミットハッシュ：[`{short_sha}`]({commit_url})", COMMENT_MARKER]
    )
    return "\n".join(lines)


def update_deploy_comment(
    host: PreviewBuildHost,
    target: TargetRepository,
    outcome: DownloadOutcome,
    *,
    bot_login: str,
    pages_url: str,
) -> CommentAction:
    match outcome.source:
        case BranchSource():
            return CommentAction.NOT_A_PULL_REQUEST
        case PullRequestSource() as pull_request:
            return _upsert_comment(host, target, outcome, pull_request, bot_login, pages_url)
        case _:
            raise TypeError(f"Not exhaustive. value: {outcome.source!r}")


def update_all_comments(
    host: PreviewBuildHost,
    results: Mapping[str, DownloadResult],
    settings: CollectorSettings,
    *,
    bot_login: str,
) -> CommentSummary:
    """Refresh the preview comment of every pull request in the manifest."""
    pull_requests = 0
    new_comments = 0
    updated_comments = 0
    for result in results.values():
        target = settings.target(result.repo_key)
        for outcome in result.data:
            action = update_deploy_comment(
                host, target, outcome, bot_login=bot_login, pages_url=settings.pages_url
            )
            if action is CommentAction.NOT_A_PULL_REQUEST:
                continue
            pull_requests += 1
            if action is CommentAction.NEW:
                new_comments += 1
            elif action is CommentAction.UPDATED:
                updated_comments += 1
    return CommentSummary(
        pull_requests=pull_requests,
        new_comments=new_comments,
        updated_comments=updated_comments,
    )


def _upsert_comment(  # pylint: disable=too-many-arguments
    host: PreviewBuildHost,
    target: TargetRepository,
    outcome: DownloadOutcome,
    pull_request: PullRequestSource,
    bot_login: str,
    pages_url: str,
) -> CommentAction:
    prefix = f"[PR #{pull_request.number}]"
    body = build_deploy_comment(target, outcome, pull_request, pages_url)

    _LOGGER.info("%s Fetching comments...", prefix)
    comments = host.list_issue_comments(target.repo, pull_request.number)
    previous = _find_previous_comment(comments, bot_login)

    if previous is None:
        _LOGGER.info("%s Adding deploy info...", prefix)
        host.create_issue_comment(target.repo, pull_request.number, body)
        return CommentAction.NEW
    if previous.get("body") == body:
        _LOGGER.info("%s No update in deploy info, skipped.", prefix)
        return CommentAction.SKIPPED
    _LOGGER.info("%s Updating deploy info...", prefix)
    host.update_issue_comment(target.repo, int(previous["id"]), body)
    return CommentAction.UPDATED


def _find_previous_comment(comments: list[JsonObject], bot_login: str) -> JsonObject | None:
    for comment in comments:
        user = comment.get("user") or {}
        body = comment.get("body") or ""
        if user.get("login") == bot_login and any(body.endswith(m) for m in COMMENT_MARKERS):
            return comment
    return None
