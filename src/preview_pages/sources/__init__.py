"""Preview source exports."""

from .source_models import (
    BranchSource,
    PullRequestSource,
    Source,
    create_cache_file_name,
    create_source_key,
    source_from_json,
    source_label,
    source_ref,
    source_to_json,
)
from .target_enumeration import fetch_targets, is_collected_branch

__all__ = [
    "BranchSource",
    "PullRequestSource",
    "Source",
    "create_cache_file_name",
    "create_source_key",
    "fetch_targets",
    "is_collected_branch",
    "source_from_json",
    "source_label",
    "source_ref",
    "source_to_json",
]
