"""Configuration loader service."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    CacheStoreSettings,
    CollectorSettings,
    PollingSettings,
    TargetLink,
    TargetRepository,
)

DEFAULT_CHECK_NAME = "build_preview_pages"
DEFAULT_ARTIFACT_NAME = "preview-pages"
DEFAULT_BRANCH_PREFIX = "project-"
DEFAULT_BRANCH = "main"
DEFAULT_DESTINATION_DIR = "public/preview"
DEFAULT_CACHE_DOWNLOAD_DIR = "cached"
DEFAULT_PAGES_URL = "https://voicevox.github.io/preview-pages"
DEFAULT_POLL_PARALLELISM = 5
DEFAULT_POLL_MAX_ATTEMPTS = 20
DEFAULT_POLL_INTERVAL_SECONDS = 15
DEFAULT_CACHE_REPO = "sevenc-nanashi/voicevox-preview-pages"
DEFAULT_CACHE_RELEASE_TAG = "preview-pages-cache"
DEFAULT_CACHE_RELEASE_NAME = "Preview Pages Cache"

DEFAULT_TARGETS: Mapping[str, Mapping[str, Any]] = {
    "editor": {
        "repo": "VOICEVOX/voicevox",
        "label": "エディタ",
        "links": [
            {
                "path": "editor/index.html",
                "button_type": "success",
                "emoji": ":pencil:",
                "label": "エディタ",
            },
            {
                "path": "storybook/index.html",
                "button_type": "danger",
                "emoji": ":book:",
                "label": "Storybook",
            },
        ],
    },
    "blog": {
        "repo": "VOICEVOX/voicevox_blog",
        "label": "ホームページ",
        "links": [
            {
                "path": "index.html",
                "button_type": "success",
                "emoji": ":house:",
                "label": "ホームページ",
            }
        ],
    },
    "docs": {
        "repo": "VOICEVOX/WIP_docs",
        "label": "ドキュメント",
        "links": [
            {
                "path": "index.html",
                "button_type": "success",
                "emoji": ":green_book:",
                "label": "ドキュメント",
            }
        ],
    },
}

_REPO_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")
_BUTTON_TYPES = ("success", "danger")


class ConfigurationError(Exception):
    """Raised when the configuration file or environment is invalid."""


def load_configuration(
    config_path: Path | str | None = None, *, base_dir: Path | None = None
) -> CollectorSettings:
    """Load and validate the configuration file, falling back to built-in defaults.

    Relative directories resolve against the configuration file's directory, or
    ``base_dir`` (default: the working directory) when no file is given.
    """
    if config_path is None:
        return _build_settings({}, path=None, base_path=(base_dir or Path.cwd()).resolve())

    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    return _build_settings(parsed, path=path, base_path=path.resolve().parent)


def _build_settings(
    parsed: Mapping[str, Any], *, path: Path | None, base_path: Path
) -> CollectorSettings:
    return CollectorSettings(
        path=path,
        check_name=_string_with_default(parsed, "check_name", DEFAULT_CHECK_NAME),
        artifact_name=_string_with_default(parsed, "artifact_name", DEFAULT_ARTIFACT_NAME),
        branch_prefix=_string_with_default(parsed, "branch_prefix", DEFAULT_BRANCH_PREFIX),
        default_branch=_string_with_default(parsed, "default_branch", DEFAULT_BRANCH),
        destination_dir=_resolve_path(
            base_path, _string_with_default(parsed, "destination_dir", DEFAULT_DESTINATION_DIR)
        ),
        cache_download_dir=_resolve_path(
            base_path,
            _string_with_default(parsed, "cache_download_dir", DEFAULT_CACHE_DOWNLOAD_DIR),
        ),
        pages_url=_string_with_default(parsed, "pages_url", DEFAULT_PAGES_URL).rstrip("/"),
        polling=_parse_polling_section(parsed.get("polling")),
        cache_store=_parse_cache_store_section(parsed.get("cache_store")),
        targets=_parse_targets_section(parsed.get("targets")),
    )


def _parse_polling_section(value: Any) -> PollingSettings:
    section = _optional_mapping(value, "polling")
    parallelism = _require_positive_int(
        section.get("parallelism", DEFAULT_POLL_PARALLELISM), "polling.parallelism"
    )
    max_attempts = _require_positive_int(
        section.get("max_attempts", DEFAULT_POLL_MAX_ATTEMPTS), "polling.max_attempts"
    )
    interval = section.get("interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS)
    if isinstance(interval, bool) or not isinstance(interval, int | float) or interval < 0:
        raise ConfigurationError("polling.interval_seconds must be a non-negative number.")
    return PollingSettings(
        parallelism=parallelism,
        max_attempts=max_attempts,
        interval_seconds=float(interval),
    )


def _parse_cache_store_section(value: Any) -> CacheStoreSettings:
    section = _optional_mapping(value, "cache_store")
    repo = _require_repo(section.get("repo", DEFAULT_CACHE_REPO), "cache_store.repo")
    release_tag = _require_non_empty_string(
        section.get("release_tag", DEFAULT_CACHE_RELEASE_TAG), "cache_store.release_tag"
    )
    release_name = _require_non_empty_string(
        section.get("release_name", DEFAULT_CACHE_RELEASE_NAME), "cache_store.release_name"
    )
    return CacheStoreSettings(repo=repo, release_tag=release_tag, release_name=release_name)


def _parse_targets_section(value: Any) -> tuple[TargetRepository, ...]:
    section = DEFAULT_TARGETS if value is None else _optional_mapping(value, "targets")
    if not section:
        raise ConfigurationError("targets must contain at least one repository.")
    targets: list[TargetRepository] = []
    for key, raw_target in section.items():
        if not isinstance(key, str) or not key.strip():
            raise ConfigurationError("targets keys must be non-empty strings.")
        label_prefix = f"targets.{key}"
        target = _optional_mapping(raw_target, label_prefix)
        repo = _require_repo(target.get("repo"), f"{label_prefix}.repo")
        label = _require_non_empty_string(target.get("label", key), f"{label_prefix}.label")
        links = _parse_links(target.get("links"), f"{label_prefix}.links")
        targets.append(TargetRepository(key=key, repo=repo, label=label, links=links))
    return tuple(targets)


def _parse_links(value: Any, field_name: str) -> tuple[TargetLink, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError(f"{field_name} must be a list.")
    links: list[TargetLink] = []
    for index, raw_link in enumerate(value):
        link_name = f"{field_name}[{index}]"
        link = _optional_mapping(raw_link, link_name)
        button_type = _require_non_empty_string(
            link.get("button_type", "success"), f"{link_name}.button_type"
        )
        if button_type not in _BUTTON_TYPES:
            raise ConfigurationError(
                f"{link_name}.button_type must be one of: {', '.join(_BUTTON_TYPES)}."
            )
        links.append(
            TargetLink(
                path=_require_non_empty_string(link.get("path"), f"{link_name}.path"),
                button_type=button_type,
                emoji=_require_non_empty_string(link.get("emoji", ":link:"), f"{link_name}.emoji"),
                label=_require_non_empty_string(link.get("label"), f"{link_name}.label"),
            )
        )
    return tuple(links)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _string_with_default(section: Mapping[str, Any], key: str, default: str) -> str:
    return _require_non_empty_string(section.get(key, default), key)


def _require_repo(value: Any, field_name: str) -> str:
    repo = _require_non_empty_string(value, field_name)
    if not _REPO_PATTERN.match(repo):
        raise ConfigurationError(f"{field_name} must look like 'owner/name'.")
    return repo


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
