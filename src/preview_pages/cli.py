"""Command line interface entry point."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click
import requests

from preview_pages.artifact_collection import (
    MANIFEST_FILENAME,
    CollectionRequest,
    NoArtifactsCollectedError,
    execute_collection_run,
    read_download_manifest,
)
from preview_pages.cache_upload import CacheUploadError, upload_cached_artifacts
from preview_pages.configuration import (
    DEFAULT_CONFIG_FILENAME,
    CollectorSettings,
    ConfigurationError,
    load_configuration,
    load_credentials,
    load_environment,
    write_placeholder_configuration,
)
from preview_pages.github_access import GitHubClient, GitHubRequestError
from preview_pages.pr_comments import update_all_comments

LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"
ENV_FILENAME = ".env"

_LOGGER = logging.getLogger("preview_pages")


class CliError(Exception):
    """Custom CLI error."""


def create_http_session() -> requests.Session:
    return requests.Session()


def configure_logging(verbose: bool) -> None:
    """Attach one console handler, bound to the current stderr, to the package logger."""
    _LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)
    for stale in [h for h in _LOGGER.handlers if getattr(h, "_preview_pages", False)]:
        _LOGGER.removeHandler(stale)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._preview_pages = True  # type: ignore[attr-defined]
    _LOGGER.addHandler(handler)


config_option = click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the YAML collector configuration (defaults are used when omitted)",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="preview-pages-collector")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Collect preview build artifacts from GitHub Actions for static hosting."""
    configure_logging(verbose)


@cli.command(name="collect")
@config_option
@click.option(
    "--fetch-url-only",
    is_flag=True,
    default=False,
    help="Resolve download URLs only and skip downloading and extracting artifacts.",
)
def collect(config_path: str | None, fetch_url_only: bool) -> None:
    """Collect preview artifacts for every configured repository."""
    settings = _load_settings(config_path)
    host = _create_host(settings)
    try:
        summary = execute_collection_run(
            CollectionRequest(fetch_url_only=fetch_url_only),
            settings,
            host=host,
            session=create_http_session(),
        )
    except (NoArtifactsCollectedError, GitHubRequestError, requests.RequestException) as exc:
        raise CliError(str(exc)) from exc
    for line in summary.summary_lines():
        click.echo(line)


@cli.command(name="upload-caches")
@config_option
def upload_caches(config_path: str | None) -> None:
    """Upload locally cached artifact zips to the cache release."""
    settings = _load_settings(config_path)
    host = _create_host(settings)
    try:
        summary = upload_cached_artifacts(host, settings.cache_store, settings.cache_download_dir)
    except (CacheUploadError, GitHubRequestError, requests.RequestException, ValueError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"Uploaded {summary.uploaded} artifacts, skipped {summary.skipped}")


@cli.command(name="update-comments")
@config_option
def update_comments(config_path: str | None) -> None:
    """Post or refresh preview comments on pull requests listed in the manifest."""
    settings = _load_settings(config_path)
    host = _create_host(settings)
    app_info = host.app_info
    if not app_info:
        raise CliError("update-comments requires GitHub App credentials.")
    manifest_path = settings.destination_dir / MANIFEST_FILENAME
    try:
        results = read_download_manifest(manifest_path)
        summary = update_all_comments(
            host, results, settings, bot_login=f"{app_info['slug']}[bot]"
        )
    except (OSError, ValueError, KeyError, GitHubRequestError, requests.RequestException) as exc:
        raise CliError(str(exc)) from exc
    click.echo(summary.summary_line())


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML collector configuration to write",
)
def generate_config(output_path: str) -> None:
    """Generate a collector configuration with the default values and guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _load_settings(config_path: str | None) -> CollectorSettings:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _create_host(settings: CollectorSettings) -> GitHubClient:
    base_dir = settings.path.resolve().parent if settings.path else Path.cwd()
    environ = load_environment(base_dir / ENV_FILENAME, os.environ)
    try:
        credentials = load_credentials(environ, base_dir=base_dir)
        return GitHubClient.from_credentials(credentials, session=create_http_session())
    except (ConfigurationError, GitHubRequestError, requests.RequestException) as exc:
        raise CliError(str(exc)) from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
