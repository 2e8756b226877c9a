"""Configuration file parsing utilities."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from crossplug.config.schemas import InstallRecord, ProjectDefaults
from crossplug.utils.filesystem import write_text_file

PROJECT_DEFAULTS_FILE = "crossplug.yaml"


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_json(path: Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e

    if not isinstance(result, dict):
        raise ConfigError(f"JSON file must contain an object: {path}", path)
    return result


def save_json(path: Path, data: dict[str, Any], indent: int = 2) -> None:
    """Atomically save data to a JSON file.

    Args:
        path: Path to write to
        data: Data to serialize
        indent: JSON indentation level
    """
    write_text_file(path, json.dumps(data, indent=indent) + "\n")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e

    if result is None:
        return {}
    if not isinstance(result, dict):
        raise ConfigError(f"YAML file must contain a mapping: {path}", path)
    return result


def load_project_defaults(project_root: Path) -> ProjectDefaults:
    """Load CLI defaults from crossplug.yaml, if present.

    Args:
        project_root: Path to the project root directory

    Returns:
        Parsed ProjectDefaults (built-in defaults when the file is absent)

    Raises:
        ConfigError: If the file exists but is invalid
    """
    config_path = project_root / PROJECT_DEFAULTS_FILE
    if not config_path.exists():
        return ProjectDefaults()

    data = load_yaml(config_path)

    try:
        return ProjectDefaults.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid project defaults: {e}", config_path) from e


def load_install_record(path: Path) -> InstallRecord:
    """Load an install record written by ``crossplug adapt --record``.

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data = load_json(path)

    try:
        return InstallRecord.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid install record: {e}", path) from e


def save_install_record(path: Path, record: InstallRecord) -> None:
    """Save an install record as JSON."""
    save_json(path, record.to_dict())
