"""Preview source entities and key derivation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

CACHE_FORMAT_VERSION = "v1"


@dataclass(frozen=True)
class BranchSource:
    """A branch whose tip produces a preview build."""

    name: str


@dataclass(frozen=True)
class PullRequestSource:
    """An open pull request whose head commit produces a preview build.

    Identity is the pull request number; the head commit only selects which
    check runs are inspected.
    """

    number: int
    head_sha: str
    head_repo_full_name: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PullRequestSource):
            return NotImplemented
        return self.number == other.number

    def __hash__(self) -> int:
        return hash(("pullRequest", self.number))


Source = BranchSource | PullRequestSource


def create_source_key(source: Source) -> str:
    """Return ``branch-{name}`` or ``pr-{number}``."""
    match source:
        case BranchSource(name=name):
            return f"branch-{name}"
        case PullRequestSource(number=number):
            return f"pr-{number}"
        case _:
            _unknown_source(source)


def source_label(source: Source) -> str:
    """Return the human-readable unit label used in log lines."""
    match source:
        case BranchSource(name=name):
            return f"Branch {name}"
        case PullRequestSource(number=number):
            return f"PR #{number}"
        case _:
            _unknown_source(source)


def create_cache_file_name(source: Source, run_id: int) -> str:
    """Return the durable cache asset name for one source build."""
    return f"{create_source_key(source)}-{run_id}-{CACHE_FORMAT_VERSION}.zip"


def source_ref(source: Source) -> str:
    """Return the git ref whose check runs describe this source's build."""
    match source:
        case BranchSource(name=name):
            return name
        case PullRequestSource(head_sha=head_sha):
            return head_sha
        case _:
            _unknown_source(source)


def source_to_json(source: Source) -> dict[str, Any]:
    match source:
        case BranchSource(name=name):
            return {"type": "branch", "branch": {"name": name}}
        case PullRequestSource():
            return {
                "type": "pullRequest",
                "pullRequest": {
                    "number": source.number,
                    "head": {
                        "sha": source.head_sha,
                        "repo": {"full_name": source.head_repo_full_name},
                    },
                },
            }
        case _:
            _unknown_source(source)


def source_from_json(payload: Mapping[str, Any]) -> Source:
    """Parse the JSON shape written by :func:`source_to_json`."""
    source_type = payload.get("type")
    if source_type == "branch":
        return BranchSource(name=str(payload["branch"]["name"]))
    if source_type == "pullRequest":
        pull_request = payload["pullRequest"]
        head = pull_request.get("head") or {}
        head_repo = head.get("repo") or {}
        return PullRequestSource(
            number=int(pull_request["number"]),
            head_sha=str(head.get("sha", "")),
            head_repo_full_name=str(head_repo.get("full_name", "")),
        )
    raise ValueError(f"Unknown source type: {source_type!r}")


def _unknown_source(source: object) -> NoReturn:
    raise TypeError(f"Not exhaustive. value: {source!r}")
