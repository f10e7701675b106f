#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/config.py
"""Configuration file discovery and loading.

Configuration lives in ``.erbkit.yml``/``.erbkit.yaml`` (YAML),
``.erbkit.toml`` (TOML) or the ``[tool.erbkit]`` table of
``pyproject.toml``. The file has a ``formatter`` and a ``linter`` section:

.. code-block:: yaml

    formatter:
      indent-width: 2
      max-line-length: 100
      rewriter:
        pre: [tailwind-class-sorter]
    linter:
      disabled-rules: [erb-no-trailing-whitespace]
      include-unsafe: false
      rules:
        html-tag-name-lowercase:
          severity: error

"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from erbkit.constants import CONFIG_FILENAMES
from erbkit.exceptions import ConfigurationError
from erbkit.options.formatter import FormatterOptions
from erbkit.options.linter import LinterOptions

logger = logging.getLogger(__name__)

PYPROJECT_FILENAME = "pyproject.toml"


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Return the ``[tool.erbkit]`` table, or an empty dict when absent.

    Raises
    ------
    ConfigurationError
        If the file is not valid TOML or the section is not a table

    """
    data = _load_toml(pyproject_path)
    config = data.get("tool", {}).get("erbkit", {})
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"[tool.erbkit] section must be a table, got {type(config).__name__}", config_path=str(pyproject_path)
        )
    return config


def _load_toml(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Error reading config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e


def _load_yaml(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Error reading config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    # An empty file is an empty configuration
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def load_config(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration file.

    The format is chosen from the file name: ``pyproject.toml`` yields its
    ``[tool.erbkit]`` table, other ``.toml`` files are read whole, and
    ``.yml``/``.yaml`` files are read as YAML.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        The raw configuration mapping

    Raises
    ------
    ConfigurationError
        If the file is missing, unreadable, malformed or of an unknown type

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))

    suffix = config_path.suffix.lower()
    if config_path.name.lower() == PYPROJECT_FILENAME:
        config = _load_pyproject_section(config_path)
    elif suffix == ".toml":
        config = _load_toml(config_path)
    elif suffix in (".yml", ".yaml"):
        config = _load_yaml(config_path)
    else:
        raise ConfigurationError(
            f"Unsupported config file format: {suffix or config_path.name}. Use .yml, .yaml or .toml",
            config_path=str(config_path),
        )

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def find_config_file(start_dir: Optional[Path | str] = None) -> Optional[Path]:
    """Find the nearest configuration file, searching parent directories.

    In each directory the dedicated files are checked first; a
    ``pyproject.toml`` only counts when it has a ``[tool.erbkit]`` table.

    Parameters
    ----------
    start_dir : Path or str, optional
        Directory to start from; the current directory when omitted

    Returns
    -------
    Path or None
        The first configuration file found

    """
    current = Path(start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if not candidate.is_file():
                continue
            if filename != PYPROJECT_FILENAME:
                return candidate
            try:
                if _load_pyproject_section(candidate):
                    return candidate
            except ConfigurationError as e:
                logger.warning(f"Skipping unreadable {candidate}: {e}")

        parent = current.parent
        if parent == current:
            return None
        current = parent


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' section must be a mapping, got {type(section).__name__}")
    return dict(section)


def _formatter_options(section: Dict[str, Any]) -> FormatterOptions:
    rewriter = section.pop("rewriter", None) or section.pop("rewriters", None) or {}
    if not isinstance(rewriter, dict):
        raise ConfigurationError("'formatter.rewriter' must be a mapping with 'pre' and 'post' lists")
    if "pre" in rewriter:
        section["pre_rewriters"] = rewriter["pre"] or ()
    if "post" in rewriter:
        section["post_rewriters"] = rewriter["post"] or ()
    return FormatterOptions.from_mapping(section)


def _linter_options(section: Dict[str, Any]) -> LinterOptions:
    rules = section.pop("rules", None) or {}
    if not isinstance(rules, dict):
        raise ConfigurationError("'linter.rules' must be a mapping of rule names to settings")

    disabled = list(section.pop("disabled_rules", None) or section.pop("disabled-rules", None) or ())
    overrides = dict(section.pop("severity_overrides", None) or section.pop("severity-overrides", None) or {})
    for rule_name, settings in rules.items():
        if not isinstance(settings, dict):
            raise ConfigurationError(f"Settings for rule '{rule_name}' must be a mapping")
        if settings.get("enabled") is False:
            disabled.append(rule_name)
        if "severity" in settings:
            overrides[rule_name] = settings["severity"]

    section["disabled_rules"] = tuple(disabled)
    section["severity_overrides"] = overrides
    return LinterOptions.from_mapping(section)


def options_from_config(config: Dict[str, Any]) -> tuple[FormatterOptions, LinterOptions]:
    """Build option objects from a raw configuration mapping.

    Parameters
    ----------
    config : dict
        Mapping as returned by :func:`load_config`

    Returns
    -------
    tuple of (FormatterOptions, LinterOptions)
        Options with defaults for anything not configured

    Raises
    ------
    ConfigurationError
        If a section has the wrong shape or holds invalid values

    """
    try:
        formatter = _formatter_options(_section(config, "formatter"))
        linter = _linter_options(_section(config, "linter"))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}", original_error=e) from e
    return formatter, linter


def load_options(config_path: Optional[Path | str] = None) -> tuple[FormatterOptions, LinterOptions]:
    """Load options from ``config_path``, or from the nearest config file.

    Defaults are returned when no file is given and none is found.
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None:
        return FormatterOptions(), LinterOptions()
    return options_from_config(load_config(path))
