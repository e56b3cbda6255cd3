"""GitHub credential selection from the process environment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

from .loader import ConfigurationError

DEFAULT_PRIVATE_KEY_PATH = "private-key.pem"


@dataclass(frozen=True)
class AppCredentials:
    """GitHub App installation credentials (read + write)."""

    app_id: int
    private_key: str = field(repr=False)
    client_id: str
    client_secret: str = field(repr=False)


@dataclass(frozen=True)
class TokenCredentials:
    """Single access token credentials (read only)."""

    token: str = field(repr=False)


Credentials = AppCredentials | TokenCredentials


def load_environment(env_file: Path | str | None, environ: Mapping[str, str]) -> dict[str, str]:
    """Merge values from an optional ``.env`` file under the real environment."""
    merged: dict[str, str] = {}
    if env_file is not None and Path(env_file).exists():
        merged.update(
            {key: value for key, value in dotenv_values(env_file).items() if value is not None}
        )
    merged.update(environ)
    return merged


def load_credentials(environ: Mapping[str, str], *, base_dir: Path | None = None) -> Credentials:
    """Pick App credentials when ``APP_ID`` is set, else ``GITHUB_TOKEN``."""
    if environ.get("APP_ID"):
        return _load_app_credentials(environ, base_dir or Path.cwd())
    token = environ.get("GITHUB_TOKEN", "").strip()
    if token:
        return TokenCredentials(token=token)
    raise ConfigurationError("No GitHub App or Token provided.")


def _load_app_credentials(environ: Mapping[str, str], base_dir: Path) -> AppCredentials:
    raw_app_id = _require_env(environ, "APP_ID")
    try:
        app_id = int(raw_app_id)
    except ValueError as exc:
        raise ConfigurationError(f"APP_ID must be an integer, got: {raw_app_id}") from exc

    private_key = environ.get("PRIVATE_KEY", "")
    if not private_key.strip():
        key_path = Path(environ.get("PRIVATE_KEY_PATH") or DEFAULT_PRIVATE_KEY_PATH)
        if not key_path.is_absolute():
            key_path = base_dir / key_path
        if not key_path.exists():
            raise ConfigurationError(
                f"Missing required env var: PRIVATE_KEY (and no key file at {key_path})"
            )
        private_key = key_path.read_text(encoding="utf-8")

    return AppCredentials(
        app_id=app_id,
        private_key=private_key,
        client_id=_require_env(environ, "CLIENT_ID"),
        client_secret=_require_env(environ, "CLIENT_SECRET"),
    )


def _require_env(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "").strip()
    if not value:
        raise ConfigurationError(f"Missing required env var: {name}")
    return value
