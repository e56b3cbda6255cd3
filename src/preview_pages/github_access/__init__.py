"""GitHub access exports."""

from .app_auth import create_app_jwt
from .client import GitHubClient
from .host_protocol import GitHubRequestError, JsonObject, PreviewBuildHost

__all__ = [
    "GitHubClient",
    "GitHubRequestError",
    "JsonObject",
    "PreviewBuildHost",
    "create_app_jwt",
]
