#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for configuration discovery and loading."""
from pathlib import Path

import pytest

from erbkit.config import find_config_file, load_config, load_options, options_from_config
from erbkit.exceptions import ConfigurationError
from erbkit.options import FormatterOptions, LinterOptions

YAML_CONFIG = """\
formatter:
  indent-width: 4
  max-line-length: 100
  rewriter:
    pre: [tailwind-class-sorter]
linter:
  disabled-rules: [erb-no-trailing-whitespace]
  include-unsafe: true
  rules:
    html-tag-name-lowercase:
      severity: error
    erb-no-empty-tags:
      enabled: false
"""

TOML_CONFIG = """\
[formatter]
indent_width = 3

[linter]
enabled_rules = ["erb-no-empty-tags"]
"""


@pytest.mark.unit
class TestLoadConfig:
    """Test reading each supported format."""

    def test_yaml(self, tmp_path: Path) -> None:
        """Test a YAML file."""
        path = tmp_path / ".erbkit.yml"
        path.write_text(YAML_CONFIG, encoding="utf-8")

        config = load_config(path)

        assert config["formatter"]["indent-width"] == 4
        assert config["linter"]["rules"]["erb-no-empty-tags"] == {"enabled": False}

    def test_empty_yaml_is_empty_config(self, tmp_path: Path) -> None:
        """Test that an empty file means defaults."""
        path = tmp_path / ".erbkit.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_toml(self, tmp_path: Path) -> None:
        """Test a TOML file."""
        path = tmp_path / ".erbkit.toml"
        path.write_text(TOML_CONFIG, encoding="utf-8")

        assert load_config(path) == {"formatter": {"indent_width": 3}, "linter": {"enabled_rules": ["erb-no-empty-tags"]}}

    def test_pyproject_section(self, tmp_path: Path) -> None:
        """Test the [tool.erbkit] table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "app"\n\n[tool.erbkit.formatter]\nindent-width = 8\n', encoding="utf-8")

        assert load_config(path) == {"formatter": {"indent-width": 8}}

    def test_pyproject_without_section(self, tmp_path: Path) -> None:
        """Test that a pyproject without the table yields an empty config."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "app"\n', encoding="utf-8")

        assert load_config(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a path that does not exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "nope.yml")

        assert exc_info.value.config_path == str(tmp_path / "nope.yml")

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        """Test an unknown file type."""
        path = tmp_path / "erbkit.json"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Unsupported config file format"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test malformed YAML."""
        path = tmp_path / ".erbkit.yml"
        path.write_text("formatter: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML") as exc_info:
            load_config(path)

        assert exc_info.value.original_error is not None

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        """Test a YAML document that is not a mapping."""
        path = tmp_path / ".erbkit.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test malformed TOML."""
        path = tmp_path / ".erbkit.toml"
        path.write_text("[formatter\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(path)


@pytest.mark.unit
class TestFindConfigFile:
    """Test configuration discovery."""

    def test_finds_in_parent(self, tmp_path: Path) -> None:
        """Test the search walks up the directory tree."""
        config = tmp_path / ".erbkit.yml"
        config.write_text("formatter: {}\n", encoding="utf-8")
        nested = tmp_path / "app" / "views"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config.resolve()

    def test_dedicated_file_wins_over_pyproject(self, tmp_path: Path) -> None:
        """Test file precedence within one directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.erbkit]\nlinter = {}\n", encoding="utf-8")
        toml = tmp_path / ".erbkit.toml"
        toml.write_text("", encoding="utf-8")

        assert find_config_file(tmp_path) == toml.resolve()

    def test_pyproject_without_section_is_skipped(self, tmp_path: Path) -> None:
        """Test that an unrelated pyproject does not stop the search."""
        config = tmp_path / ".erbkit.yaml"
        config.write_text("", encoding="utf-8")
        project = tmp_path / "project"
        project.mkdir()
        (project / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")

        assert find_config_file(project) == config.resolve()

    def test_pyproject_with_section(self, tmp_path: Path) -> None:
        """Test that a pyproject carrying the table is found."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.erbkit.formatter]\nindent-width = 2\n", encoding="utf-8")

        assert find_config_file(tmp_path) == pyproject.resolve()


@pytest.mark.unit
class TestOptionsFromConfig:
    """Test conversion of raw mappings into options."""

    def test_full_config(self, tmp_path: Path) -> None:
        """Test every supported key in one file."""
        path = tmp_path / ".erbkit.yml"
        path.write_text(YAML_CONFIG, encoding="utf-8")

        formatter, linter = load_options(path)

        assert formatter.indent_width == 4
        assert formatter.max_line_length == 100
        assert formatter.pre_rewriters == ("tailwind-class-sorter",)
        assert linter.include_unsafe is True
        assert linter.disabled_rules == ("erb-no-trailing-whitespace", "erb-no-empty-tags")
        assert dict(linter.severity_overrides) == {"html-tag-name-lowercase": "error"}

    def test_empty_config_gives_defaults(self) -> None:
        """Test an empty mapping."""
        formatter, linter = options_from_config({})

        assert formatter == FormatterOptions()
        assert linter.disabled_rules == ()
        assert linter.enabled_rules is None

    def test_post_rewriters(self) -> None:
        """Test the post phase list."""
        formatter, _ = options_from_config({"formatter": {"rewriters": {"post": ["upper"]}}})

        assert formatter.post_rewriters == ("upper",)
        assert formatter.pre_rewriters == ()

    def test_unknown_option(self) -> None:
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="indent_size"):
            options_from_config({"formatter": {"indent_size": 2}})

    def test_invalid_value(self) -> None:
        """Test that option validation errors are wrapped."""
        with pytest.raises(ConfigurationError) as exc_info:
            options_from_config({"formatter": {"max-line-length": 0}})

        assert isinstance(exc_info.value.original_error, ValueError)

    def test_invalid_severity(self) -> None:
        """Test an unknown severity name."""
        with pytest.raises(ConfigurationError, match="Invalid severity"):
            options_from_config({"linter": {"rules": {"erb-no-empty-tags": {"severity": "fatal"}}}})

    @pytest.mark.parametrize(
        "config",
        [
            {"formatter": ["indent-width"]},
            {"formatter": {"rewriter": ["tailwind-class-sorter"]}},
            {"linter": {"rules": ["erb-no-empty-tags"]}},
            {"linter": {"rules": {"erb-no-empty-tags": "off"}}},
        ],
    )
    def test_wrong_shapes(self, config: dict) -> None:
        """Test sections and sub-keys with the wrong type."""
        with pytest.raises(ConfigurationError):
            options_from_config(config)

    def test_load_options_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults when discovery finds nothing."""
        monkeypatch.setattr("erbkit.config.find_config_file", lambda start_dir=None: None)

        formatter, linter = load_options()

        assert formatter == FormatterOptions()
        assert linter == LinterOptions()
