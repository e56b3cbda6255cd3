"""Enumerate preview sources for one repository."""

from __future__ import annotations

from preview_pages.configuration.runtime_settings import CollectorSettings, TargetRepository
from preview_pages.github_access.host_protocol import PreviewBuildHost

from .source_models import BranchSource, PullRequestSource, Source


def is_collected_branch(name: str, *, prefix: str, default_branch: str) -> bool:
    return name.startswith(prefix) or name == default_branch


def fetch_targets(
    host: PreviewBuildHost, target: TargetRepository, settings: CollectorSettings
) -> list[Source]:
    """Return qualifying branches followed by every open pull request."""
    sources: list[Source] = [
        BranchSource(name=branch["name"])
        for branch in host.list_branches(target.repo)
        if is_collected_branch(
            branch["name"], prefix=settings.branch_prefix, default_branch=settings.default_branch
        )
    ]
    for pull_request in host.list_open_pull_requests(target.repo):
        head = pull_request.get("head") or {}
        head_repo = head.get("repo") or {}
        sources.append(
            PullRequestSource(
                number=int(pull_request["number"]),
                head_sha=head["sha"],
                # Head repository is null when the fork was deleted.
                head_repo_full_name=head_repo.get("full_name", target.repo),
            )
        )
    return sources
