from __future__ import annotations

import json
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from depgrouper.cli import cli, main
from depgrouper.exceptions import DepGrouperError
from depgrouper.utils.logger import disable_logging
from depgrouper.utils.console import reconfigure_console


@pytest.fixture(autouse=True)
def isolated_cli(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Run each test from an empty directory and reset global CLI state."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("DEPGROUPER_CONFIG", raising=False)
    yield
    disable_logging()
    reconfigure_console()


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A repository with two job directories."""
    (tmp_path / "repo" / "api").mkdir(parents=True)
    (tmp_path / "repo" / "worker").mkdir(parents=True)
    (tmp_path / "repo" / "api" / "requirements.txt").write_text(
        "django==4.2.0\ndjango-storages==1.14\nrequests==2.31.0\n",
        encoding="utf-8",
    )
    (tmp_path / "repo" / "worker" / "requirements.txt").write_text(
        "celery==5.3.0\n",
        encoding="utf-8",
    )
    return tmp_path / "repo"


def _config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "job.toml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.unit
class TestAssignCommand:
    """Tests for the ``depgrouper assign`` command."""

    def test_json_output(self, tmp_path: Path, repo: Path) -> None:
        """Test JSON output lists groups and ungrouped dependencies."""
        config = _config(
            tmp_path,
            '[depgrouper]\ndirectories = ["/api", "/worker"]\n\n'
            '[[depgrouper.groups]]\nname = "web"\npatterns = ["django*"]\n',
        )

        result = CliRunner().invoke(
            cli, ["-c", str(config), "assign", str(repo), "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["groups"] == [
            {
                "name": "web",
                "rules": {"patterns": ["django*"]},
                "dependencies": ["django", "django-storages"],
            }
        ]
        assert data["ungrouped"] == ["requests", "celery"]
        assert data["dependency_group_to_refresh"] is None

    def test_security_run_synthesizes_group(self, tmp_path: Path, repo: Path) -> None:
        """Test a multi-directory security refresh targets the catch-all group."""
        config = _config(
            tmp_path,
            "[depgrouper]\n"
            'package-manager = "pip"\n'
            'directories = ["/api", "/worker"]\n'
            "updating-a-pull-request = true\n",
        )

        result = CliRunner().invoke(
            cli,
            [
                "-c",
                str(config),
                "assign",
                str(repo),
                "--security-updates-only",
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [g["name"] for g in data["groups"]] == ["pip group"]
        assert data["groups"][0]["dependencies"] == [
            "django",
            "django-storages",
            "requests",
            "celery",
        ]
        assert data["ungrouped"] == []
        assert data["dependency_group_to_refresh"] == "pip group"

    def test_group_filter(self, tmp_path: Path, repo: Path) -> None:
        """Test --group shows only the requested group."""
        config = _config(
            tmp_path,
            '[depgrouper]\ndirectory = "/api"\n\n'
            '[[depgrouper.groups]]\nname = "web"\npatterns = ["django*"]\n\n'
            '[[depgrouper.groups]]\nname = "http"\npatterns = ["requests"]\n',
        )

        result = CliRunner().invoke(
            cli,
            ["-c", str(config), "assign", str(repo), "-g", "http", "-f", "json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [g["name"] for g in data["groups"]] == ["http"]
        assert data["ungrouped"] == []

    def test_unknown_group_fails(self, tmp_path: Path, repo: Path) -> None:
        """Test an unknown --group name exits with an error."""
        config = _config(
            tmp_path,
            '[depgrouper]\ndirectory = "/api"\n\n'
            '[[depgrouper.groups]]\nname = "web"\npatterns = ["django*"]\n',
        )

        result = CliRunner().invoke(
            cli, ["-c", str(config), "assign", str(repo), "--group", "nope"]
        )

        assert result.exit_code == 1
        assert "Unknown dependency group: nope" in result.output

    def test_table_output(self, tmp_path: Path, repo: Path) -> None:
        """Test the table view names every group and the ungrouped row."""
        config = _config(
            tmp_path,
            '[depgrouper]\ndirectory = "/api"\n\n'
            '[[depgrouper.groups]]\nname = "web"\npatterns = ["django*"]\n',
        )

        result = CliRunner().invoke(cli, ["-c", str(config), "assign", str(repo)])

        assert result.exit_code == 0, result.output
        assert "web" in result.output
        assert "(ungrouped)" in result.output
        assert "1 of 1 group(s) matched dependencies" in result.output

    def test_table_output_keeps_bracketed_group_name(
        self, tmp_path: Path, repo: Path
    ) -> None:
        """Test a group name in square brackets is shown as written."""
        config = _config(
            tmp_path,
            '[depgrouper]\ndirectory = "/api"\n\n'
            '[[depgrouper.groups]]\nname = "[web]"\npatterns = ["django*"]\n',
        )

        result = CliRunner().invoke(cli, ["-c", str(config), "assign", str(repo)])

        assert result.exit_code == 0, result.output
        assert "[web]" in result.output

    def test_unknown_bracketed_group_reported_literally(
        self, tmp_path: Path, repo: Path
    ) -> None:
        """Test the unknown-group error keeps the brackets of the name."""
        result = CliRunner().invoke(
            cli, ["assign", str(repo / "api"), "--group", "[web]"]
        )

        assert result.exit_code == 1
        assert "Unknown dependency group: [web]" in result.output

    def test_defaults_without_config(self, repo: Path) -> None:
        """Test without configuration every dependency is ungrouped."""
        result = CliRunner().invoke(cli, ["assign", str(repo / "api"), "-f", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["groups"] == []
        assert data["ungrouped"] == ["django", "django-storages", "requests"]

    def test_parse_error_exits_one(self, tmp_path: Path) -> None:
        """Test invalid requirement files are reported as errors."""
        (tmp_path / "requirements.txt").write_text("bad req!!\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["assign", str(tmp_path)])

        assert result.exit_code == 1
        assert "Invalid requirement" in result.output

    def test_invalid_config_exits_one(self, tmp_path: Path, repo: Path) -> None:
        """Test configuration errors stop the CLI before running commands."""
        config = _config(tmp_path, "[depgrouper]\nunknown = 1\n")

        result = CliRunner().invoke(cli, ["-c", str(config), "assign", str(repo)])

        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.output


@pytest.mark.unit
class TestMainEntryPoint:
    """Tests for depgrouper.cli.main exit code mapping."""

    def test_success(self) -> None:
        with patch("depgrouper.cli.cli") as mock_cli:
            assert main() == 0

        mock_cli.assert_called_once_with(standalone_mode=False)

    @pytest.mark.parametrize(
        "error,expected",
        [
            (DepGrouperError("boom"), 1),
            (KeyboardInterrupt(), 130),
            (click.UsageError("bad usage"), 2),
            (SystemExit(1), 1),
            (RuntimeError("unexpected"), 1),
        ],
        ids=["depgrouper-error", "interrupt", "usage", "system-exit", "unexpected"],
    )
    def test_error_exit_codes(self, error: BaseException, expected: int) -> None:
        with patch("depgrouper.cli.cli", side_effect=error):
            assert main() == expected
