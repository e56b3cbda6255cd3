"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TargetLink:
    """Presentation link rendered for a preview; not interpreted by collection."""

    path: str
    button_type: str
    emoji: str
    label: str


@dataclass(frozen=True)
class TargetRepository:
    """A configured repository whose preview builds are collected."""

    key: str
    repo: str
    label: str
    links: tuple[TargetLink, ...]

    @property
    def owner(self) -> str:
        return self.repo.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repo.split("/", 1)[1]


@dataclass(frozen=True)
class PollingSettings:
    """Completion polling bounds shared by every waiter in one pass."""

    parallelism: int
    max_attempts: int
    interval_seconds: float


@dataclass(frozen=True)
class CacheStoreSettings:
    """Release used as the durable artifact cache."""

    repo: str
    release_tag: str
    release_name: str


@dataclass(frozen=True)
class CollectorSettings:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration aggregate."""

    path: Path | None
    check_name: str
    artifact_name: str
    branch_prefix: str
    default_branch: str
    destination_dir: Path
    cache_download_dir: Path
    pages_url: str
    polling: PollingSettings
    cache_store: CacheStoreSettings
    targets: tuple[TargetRepository, ...]

    def target(self, key: str) -> TargetRepository:
        for target in self.targets:
            if target.key == key:
                return target
        raise KeyError(f"Unknown target repository key: {key}")
