"""Tests for configuration scaffold generation."""

from __future__ import annotations

from pathlib import Path

import pytest
from preview_pages.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from preview_pages.configuration.loader import load_configuration


def test_build_placeholder_configuration_documents_every_section() -> None:
    text = build_placeholder_configuration()

    for key in ("check_name:", "artifact_name:", "polling:", "cache_store:", "targets:"):
        assert key in text
    assert "GITHUB_TOKEN" in text


def test_written_scaffold_loads_as_valid_configuration(tmp_path: Path) -> None:
    output = write_placeholder_configuration(tmp_path / "preview-pages.yaml")

    settings = load_configuration(output)

    assert output == (tmp_path / "preview-pages.yaml").resolve()
    assert settings.polling.parallelism == 5
    assert [target.key for target in settings.targets] == ["editor"]
    assert settings.destination_dir == (tmp_path / "public" / "preview").resolve()


def test_write_placeholder_configuration_refuses_to_overwrite(tmp_path: Path) -> None:
    existing = tmp_path / "preview-pages.yaml"
    existing.write_text("check_name: keep\n", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(existing)
    assert existing.read_text(encoding="utf-8") == "check_name: keep\n"
