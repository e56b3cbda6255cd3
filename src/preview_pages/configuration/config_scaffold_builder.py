"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "preview-pages.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Collector configuration for preview-pages.
# Every key is optional; omitted keys use the built-in defaults shown here.
# Credentials are never stored here: set APP_ID/PRIVATE_KEY/CLIENT_ID/CLIENT_SECRET
# or GITHUB_TOKEN in the environment (or a .env file).

# Name of the check run that builds the preview.
check_name: "build_preview_pages"
# Name of the workflow artifact holding the preview zip.
artifact_name: "preview-pages"
# Branches starting with this prefix, plus the default branch, are collected.
branch_prefix: "project-"
default_branch: "main"

# Relative paths resolve against this file's directory.
destination_dir: "public/preview"
cache_download_dir: "cached"
pages_url: "https://voicevox.github.io/preview-pages"

polling:
  # At most this many jobs are polled at the same time.
  parallelism: 5
  max_attempts: 20
  interval_seconds: 15

cache_store:
  repo: "sevenc-nanashi/voicevox-preview-pages"
  release_tag: "preview-pages-cache"
  release_name: "Preview Pages Cache"

targets:
  editor:
    repo: "VOICEVOX/voicevox"
    label: "エディタ"
    links:
      - path: "editor/index.html"
        button_type: "success"
        emoji: ":pencil:"
        label: "エディタ"
      - path: "storybook/index.html"
        button_type: "danger"
        emoji: ":book:"
        label: "Storybook"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML collector configuration with the default values and guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the collector configuration scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
