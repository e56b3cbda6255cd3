"""Pull request preview comment tests."""

from __future__ import annotations

from pathlib import Path

from preview_pages.artifact_collection.collection_contracts import DownloadOutcome, DownloadResult
from preview_pages.configuration.loader import load_configuration
from preview_pages.pr_comments.deploy_comments import (
    COMMENT_MARKER,
    CommentAction,
    CommentSummary,
    build_deploy_comment,
    update_all_comments,
    update_deploy_comment,
)
from preview_pages.sources.source_models import BranchSource, PullRequestSource
from support.fake_host import FakeGitHubHost, make_settings, make_target

BOT = "preview-bot[bot]"
REPO = "example/editor"
PAGES_URL = "https://pages.example.com/preview-pages"
PULL_REQUEST = PullRequestSource(12, "0123456789abcdef", "fork/editor")
PR_OUTCOME = DownloadOutcome(PULL_REQUEST, False, "editor/pr-12", 33)


def test_comment_links_every_configured_page_and_head_commit() -> None:
    body = build_deploy_comment(make_target(), PR_OUTCOME, PULL_REQUEST, PAGES_URL)

    assert body.splitlines() == [
        ":rocket: プレビュー用ページを作成しました :rocket:",
        "",
        '- <a href="https://pages.example.com/preview-pages/preview/editor/pr-12/editor/index.html"'
        ' target="_blank">:pencil: Editor</a>',
        "",
        "更新時点でのコミットハッシュ：[`0123456`]"
        "(https://github.com/fork/editor/commit/0123456789abcdef)",
        COMMENT_MARKER,
    ]


def test_branch_outcomes_are_not_commented() -> None:
    host = FakeGitHubHost()
    outcome = DownloadOutcome(BranchSource("main"), False, "editor/branch-main", 1)

    action = update_deploy_comment(
        host, make_target(), outcome, bot_login=BOT, pages_url=PAGES_URL
    )

    assert action is CommentAction.NOT_A_PULL_REQUEST
    assert host.calls == []


def test_first_deploy_creates_comment_then_identical_body_is_skipped() -> None:
    host = FakeGitHubHost()
    target = make_target()

    first = update_deploy_comment(host, target, PR_OUTCOME, bot_login=BOT, pages_url=PAGES_URL)
    second = update_deploy_comment(host, target, PR_OUTCOME, bot_login=BOT, pages_url=PAGES_URL)

    assert first is CommentAction.NEW
    assert second is CommentAction.SKIPPED
    assert len(host.comments[(REPO, 12)]) == 1
    assert host.call_count("update_issue_comment") == 0


def test_changed_body_updates_previous_bot_comment_in_place() -> None:
    host = FakeGitHubHost()
    host.comments[(REPO, 12)] = [
        {"id": 1, "body": "Looks good", "user": {"login": "reviewer"}},
        {"id": 2, "body": f"old links\n{COMMENT_MARKER}", "user": {"login": "someone"}},
        {
            "id": 3,
            "body": "old links\n<!-- voiccevox preview-pages info -->",
            "user": {"login": BOT},
        },
    ]

    action = update_deploy_comment(
        host, make_target(), PR_OUTCOME, bot_login=BOT, pages_url=PAGES_URL
    )

    assert action is CommentAction.UPDATED
    assert host.call_count("create_issue_comment") == 0
    (comment,) = [c for c in host.comments[(REPO, 12)] if c["id"] == 3]
    assert comment["body"].endswith(COMMENT_MARKER)


def test_update_all_comments_counts_pull_requests_only(tmp_path: Path) -> None:
    host = FakeGitHubHost()
    results = {
        "editor": DownloadResult(
            repo_key="editor",
            data=(
                DownloadOutcome(BranchSource("main"), False, "editor/branch-main", 1),
                PR_OUTCOME,
                DownloadOutcome(PullRequestSource(13, "abc", REPO), True, "editor/pr-13", 2),
            ),
            num_targets=3,
        )
    }
    settings = make_settings(tmp_path)
    update_deploy_comment(
        host, settings.target("editor"), PR_OUTCOME, bot_login=BOT, pages_url=PAGES_URL
    )
    host.calls.clear()

    summary = update_all_comments(host, results, settings, bot_login=BOT)

    assert summary == CommentSummary(pull_requests=2, new_comments=1, updated_comments=0)
    assert summary.summary_line() == "Done: 1 new comments, 0 updated comments / 2 PRs"
    assert host.call_count("list_issue_comments") == 2


def test_comment_left_by_earlier_deployments_is_not_rewritten(tmp_path: Path) -> None:
    target = load_configuration(None, base_dir=tmp_path).target("editor")
    pull_request = PullRequestSource(8, "fedcba9876543210", "VOICEVOX/voicevox")
    outcome = DownloadOutcome(pull_request, False, "editor/pr-8", 5)
    existing_body = "\n".join(
        [
            ":rocket: プレビュー用ページを作成しました :rocket:",
            "",
            '- <a href="https://voicevox.github.io/preview-pages/preview/editor/pr-8/'
            'editor/index.html" target="_blank">:pencil: エディタ</a>',
            '- <a href="https://voicevox.github.io/preview-pages/preview/editor/pr-8/'
            'storybook/index.html" target="_blank">:book: Storybook</a>',
            "",
            "更新時点でのコミットハッシュ：[`fedcba9`]"
            "(https://github.com/VOICEVOX/voicevox/commit/fedcba9876543210)",
            COMMENT_MARKER,
        ]
    )
    host = FakeGitHubHost()
    host.comments[("VOICEVOX/voicevox", 8)] = [
        {"id": 9, "body": existing_body, "user": {"login": BOT}}
    ]

    action = update_deploy_comment(
        host,
        target,
        outcome,
        bot_login=BOT,
        pages_url="https://voicevox.github.io/preview-pages",
    )

    assert action is CommentAction.SKIPPED
    assert host.call_count("update_issue_comment") == 0
