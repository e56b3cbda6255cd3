"""Boundary tests for collection internal dependencies."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_collection_core_depends_on_host_protocol_not_http_client() -> None:
    package_dir = _project_root() / "src" / "preview_pages"
    core_modules = [
        *sorted((package_dir / "artifact_collection").glob("*.py")),
        *sorted((package_dir / "sources").glob("*.py")),
        *sorted((package_dir / "pr_comments").glob("*.py")),
        *sorted((package_dir / "cache_upload").glob("*.py")),
    ]
    forbidden_import_fragments = (
        "import requests",
        "preview_pages.github_access.client",
        "preview_pages.cli",
    )

    assert core_modules
    for module_path in core_modules:
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden core dependency in {module_path}: {fragment}"
