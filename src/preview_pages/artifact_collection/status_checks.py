"""Locate the preview build check run for a source."""

from __future__ import annotations

import re

from preview_pages.github_access.host_protocol import PreviewBuildHost
from preview_pages.sources.source_models import Source, source_ref

from .collection_contracts import CheckRunReference, MalformedCheckError
from .unit_logging import UnitLogAdapter

_RUN_ID_PATTERN = re.compile(r"/runs/([0-9]+)")


def extract_run_id(details_url: str) -> int | None:
    match = _RUN_ID_PATTERN.search(details_url)
    return int(match.group(1)) if match else None


def resolve_check_run(
    host: PreviewBuildHost,
    repo: str,
    source: Source,
    check_name: str,
    log: UnitLogAdapter,
) -> CheckRunReference | None:
    """Return the job/run identifiers of the named check, or ``None`` when no build exists."""
    log.info("Checking...")
    check_runs = host.list_check_runs(repo, source_ref(source))
    build_check = next((run for run in check_runs if run.get("name") == check_name), None)
    if build_check is None:
        log.info("No build check found")
        return None

    details_url = build_check.get("details_url")
    if not details_url:
        raise MalformedCheckError(f'Build check "{check_name}" does not have a details URL.')

    run_id = extract_run_id(details_url)
    if run_id is None:
        log.error("Failed to extract check run ID from details URL: %s", details_url)
        return None
    return CheckRunReference(job_id=int(build_check["id"]), run_id=run_id)
