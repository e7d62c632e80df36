from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from depgrouper.config import (
    DepGrouperConfig,
    discover_config_file,
    load_config,
    _parse_section,
    _pyproject_has_depgrouper_section,
    _read_toml,
)
from depgrouper.exceptions import ConfigError
from depgrouper.models import Job, Source

CONFIG_TOML = """
[depgrouper]
package-manager = "pip"
directories = ["/api", "/worker"]
security-updates-only = true

[[depgrouper.groups]]
name = "web"
patterns = ["django*"]
exclude-patterns = ["django-debug-toolbar"]
dependency-type = "production"
update-types = ["minor", "patch"]

[[depgrouper.groups]]
name = "http"
patterns = ["requests", "urllib3"]
"""


@pytest.mark.unit
class TestDepGrouperConfig:
    """Tests for DepGrouperConfig dataclass."""

    def test_default_initialization(self) -> None:
        """Test DepGrouperConfig initializes with correct defaults."""
        config = DepGrouperConfig()

        assert config.package_manager == "pip"
        assert config.directory == "/"
        assert config.directories is None
        assert config.security_updates_only is False
        assert config.updating_a_pull_request is False
        assert config.dependency_group_to_refresh is None
        assert config.groups == []
        assert config.source_path is None

    def test_to_log_dict(self) -> None:
        """Test to_log_dict lists group names and omits metadata."""
        config = DepGrouperConfig(
            groups=[{"name": "web", "rules": {}}],
            source_path=Path("/test/path.toml"),
        )

        result = config.to_log_dict()

        assert result["groups"] == ["web"]
        assert "source_path" not in result

    def test_to_job(self) -> None:
        """Test to_job builds a Job mirroring the configuration."""
        config = DepGrouperConfig(
            package_manager="npm_and_yarn",
            directories=["/a", "/b"],
            security_updates_only=True,
            updating_a_pull_request=True,
            dependency_group_to_refresh="old",
            groups=[{"name": "web", "rules": {"patterns": ["react*"]}}],
        )

        job = config.to_job()

        assert job == Job(
            package_manager="npm_and_yarn",
            source=Source(directory="/", directories=["/a", "/b"]),
            dependency_groups=[{"name": "web", "rules": {"patterns": ["react*"]}}],
            security_updates_only=True,
            updating_a_pull_request=True,
            dependency_group_to_refresh="old",
        )

    def test_to_job_copies_groups(self) -> None:
        """Test mutating the job's groups leaves the config untouched."""
        config = DepGrouperConfig(groups=[{"name": "web", "rules": {}}])

        job = config.to_job()
        job.dependency_groups.append({"name": "extra", "rules": {}})
        job.dependency_groups[0]["rules"]["patterns"] = ["*"]

        assert config.groups == [{"name": "web", "rules": {}}]


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        """Test explicit path is used when provided and exists."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[depgrouper]\n", encoding="utf-8")
        (tmp_path / "depgrouper.toml").write_text("[depgrouper]\n", encoding="utf-8")

        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        """Test ConfigError raised when explicit path doesn't exist."""
        with pytest.raises(ConfigError) as exc_info:
            discover_config_file(tmp_path / "nonexistent.toml")

        assert "not found" in str(exc_info.value).lower()

    def test_discovers_depgrouper_toml(self, tmp_path: Path) -> None:
        """Test discovers depgrouper.toml in current directory."""
        config_file = tmp_path / "depgrouper.toml"
        config_file.write_text("[depgrouper]\n", encoding="utf-8")

        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == config_file

    def test_discovers_pyproject_toml_with_section(self, tmp_path: Path) -> None:
        """Test discovers pyproject.toml with [tool.depgrouper] section."""
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text(
            '[tool.depgrouper]\npackage-manager = "pip"\n', encoding="utf-8"
        )

        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == config_file

    def test_ignores_pyproject_toml_without_section(self, tmp_path: Path) -> None:
        """Test ignores pyproject.toml without [tool.depgrouper] section."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.other]\nkey = 'value'\n", encoding="utf-8"
        )

        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_precedence_order(self, tmp_path: Path) -> None:
        """Test depgrouper.toml wins over pyproject.toml."""
        dedicated = tmp_path / "depgrouper.toml"
        dedicated.write_text("[depgrouper]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text(
            "[tool.depgrouper]\n", encoding="utf-8"
        )

        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == dedicated


@pytest.mark.unit
class TestPyprojectHasDepgrouperSection:
    """Tests for _pyproject_has_depgrouper_section helper."""

    def test_returns_true_when_section_exists(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.depgrouper]\n", encoding="utf-8")

        assert _pyproject_has_depgrouper_section(config_file) is True

    def test_returns_false_on_errors(self, tmp_path: Path) -> None:
        """Test returns False gracefully on parse errors or missing files."""
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("invalid ][[", encoding="utf-8")

        assert _pyproject_has_depgrouper_section(config_file) is False
        assert _pyproject_has_depgrouper_section(tmp_path / "missing.toml") is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml helper."""

    def test_reads_valid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "test.toml"
        toml_file.write_text(CONFIG_TOML, encoding="utf-8")

        result = _read_toml(toml_file)

        assert result["depgrouper"]["groups"][0]["name"] == "web"

    def test_raises_error_on_invalid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "invalid.toml"
        toml_file.write_text("invalid ][[ toml", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            _read_toml(toml_file)

        assert "Invalid TOML" in str(exc_info.value)

    def test_raises_error_when_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _read_toml(tmp_path / "missing.toml")

        assert "Cannot read" in str(exc_info.value)


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        """Test defaults are returned when nothing is found."""
        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config == DepGrouperConfig()

    def test_loads_full_configuration(self, tmp_path: Path) -> None:
        """Test every option and group is loaded from depgrouper.toml."""
        config_file = tmp_path / "depgrouper.toml"
        config_file.write_text(CONFIG_TOML, encoding="utf-8")

        config = load_config(config_file)

        assert config.package_manager == "pip"
        assert config.directories == ["/api", "/worker"]
        assert config.security_updates_only is True
        assert config.groups == [
            {
                "name": "web",
                "rules": {
                    "patterns": ["django*"],
                    "exclude-patterns": ["django-debug-toolbar"],
                    "update-types": ["minor", "patch"],
                    "dependency-type": "production",
                },
            },
            {"name": "http", "rules": {"patterns": ["requests", "urllib3"]}},
        ]
        assert config.source_path == config_file.resolve()

    def test_loads_from_pyproject(self, tmp_path: Path) -> None:
        """Test the [tool.depgrouper] table is read from pyproject.toml."""
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text(
            '[tool.depgrouper]\npackage-manager = "uv"\n', encoding="utf-8"
        )

        with patch("depgrouper.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.package_manager == "uv"

    def test_empty_section_uses_defaults(self, tmp_path: Path) -> None:
        """Test an empty section keeps defaults but records the source."""
        config_file = tmp_path / "depgrouper.toml"
        config_file.write_text("[other]\n", encoding="utf-8")

        config = load_config(config_file)

        assert config.groups == []
        assert config.source_path == config_file.resolve()


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section validation."""

    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({"grups": []}, config_path="x.toml")

        assert "Unknown configuration keys: grups" in str(exc_info.value)

    @pytest.mark.parametrize(
        "key,value",
        [
            ("security-updates-only", "yes"),
            ("updating-a-pull-request", 1),
            ("package-manager", ""),
            ("directory", 3),
            ("directories", "/api"),
            ("dependency-group-to-refresh", ["web"]),
        ],
    )
    def test_type_errors_name_option(self, key: str, value: object) -> None:
        """Test wrong types raise ConfigError naming the option."""
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({key: value}, config_path="x.toml")

        assert exc_info.value.option == key

    def test_groups_must_be_list(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({"groups": {"name": "web"}}, config_path="x.toml")

        assert exc_info.value.option == "groups"

    def test_group_requires_name(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({"groups": [{"patterns": ["*"]}]}, config_path="x.toml")

        assert "missing a name" in str(exc_info.value)
        assert exc_info.value.option == "groups[0]"

    def test_group_unknown_key(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(
                {"groups": [{"name": "web", "pattern": ["*"]}]},
                config_path="x.toml",
            )

        assert "pattern" in str(exc_info.value)

    def test_group_must_be_table(self) -> None:
        with pytest.raises(ConfigError):
            _parse_section({"groups": ["web"]}, config_path="x.toml")

    def test_duplicate_group_names(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(
                {"groups": [{"name": "web"}, {"name": "web"}]},
                config_path="x.toml",
            )

        assert exc_info.value.option == "groups[1].name"

    def test_invalid_dependency_type(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(
                {"groups": [{"name": "web", "dependency-type": "optional"}]},
                config_path="x.toml",
            )

        assert exc_info.value.option == "groups[0].dependency-type"

    def test_invalid_update_types(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(
                {"groups": [{"name": "web", "update-types": ["minor", "huge"]}]},
                config_path="x.toml",
            )

        assert "huge" in str(exc_info.value)

    def test_patterns_must_be_strings(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(
                {"groups": [{"name": "web", "patterns": ["ok", 1]}]},
                config_path="x.toml",
            )

        assert exc_info.value.option == "groups[0].patterns"

    def test_group_without_rules(self) -> None:
        config = _parse_section({"groups": [{"name": "all"}]}, config_path="x.toml")

        assert config.groups == [{"name": "all", "rules": {}}]
