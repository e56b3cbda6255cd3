"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from preview_pages.cli import main


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("GITHUB_TOKEN", "APP_ID", "PRIVATE_KEY", "CLIENT_ID", "CLIENT_SECRET"):
        monkeypatch.delenv(name, raising=False)


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["collect", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option" in captured.err
    assert "--bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_credentials_fail_before_any_request(capsys) -> None:
    exit_code = main(["collect"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "No GitHub App or Token provided." in captured.err
    assert "Traceback" not in captured.err


def test_invalid_configuration_is_reported(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "preview-pages.yaml"
    config_path.write_text("polling:\n  parallelism: -1\n", encoding="utf-8")

    exit_code = main(["collect", "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "polling.parallelism must be greater than zero" in captured.err


def test_generate_config_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    output = tmp_path / "preview-pages.yaml"
    assert main(["generate-config", "--output", str(output)]) == 0
    capsys.readouterr()

    exit_code = main(["generate-config", "--output", str(output)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "already exists" in captured.err
