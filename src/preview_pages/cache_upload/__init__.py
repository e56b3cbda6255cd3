"""Cache upload exports."""

from .release_cache_uploader import (
    CacheUploadError,
    UploadSummary,
    ensure_cache_release,
    upload_cached_artifacts,
)

__all__ = [
    "CacheUploadError",
    "UploadSummary",
    "ensure_cache_release",
    "upload_cached_artifacts",
]
