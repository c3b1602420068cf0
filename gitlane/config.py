"""Configuration management for gitlane.

Handles user-level configuration stored in ~/.gitlane/config.yaml and the
optional per-repository .gitlane/config.yaml, which may override
commit_limit and infer_branch_origins.

Environment variables GITLANE_LOG_LEVEL and GITLANE_LOG_FORMAT override the
logging settings of both files.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when there's an error with configuration."""
    pass


_CONFIG_DIR = Path.home() / ".gitlane"

# Keys a repository may override in its own .gitlane/config.yaml
REPO_OVERRIDABLE_KEYS = ("commit_limit", "infer_branch_origins")


class GitlaneConfig(BaseModel):
    """Effective gitlane settings."""

    git_binary: str = "git"
    commit_limit: int = Field(default=300, ge=1)
    infer_branch_origins: bool = True
    locale: str = "C"
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level


def get_global_config_dir() -> Path:
    """Get the global gitlane configuration directory.

    Returns:
        Path to ~/.gitlane/
    """
    return _CONFIG_DIR


def get_config_file_path() -> Path:
    """Get path to the global config.yaml file."""
    return get_global_config_dir() / "config.yaml"


def get_repo_config_file_path(repo_root: Path) -> Path:
    """Get path to a repository's .gitlane/config.yaml file."""
    return Path(repo_root) / ".gitlane" / "config.yaml"


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    return data


def _env_overrides() -> Dict[str, Any]:
    overrides = {}
    if os.environ.get("GITLANE_LOG_LEVEL"):
        overrides["log_level"] = os.environ["GITLANE_LOG_LEVEL"]
    if os.environ.get("GITLANE_LOG_FORMAT"):
        overrides["log_format"] = os.environ["GITLANE_LOG_FORMAT"]
    return overrides


def load_config(repo_root: Optional[Path] = None) -> GitlaneConfig:
    """Load the effective configuration.

    Precedence, lowest first: defaults, ~/.gitlane/config.yaml, the
    repository's .gitlane/config.yaml (REPO_OVERRIDABLE_KEYS only),
    environment variables.

    Args:
        repo_root: Repository whose overrides apply (optional).

    Returns:
        The validated GitlaneConfig.

    Raises:
        ConfigError: If a file cannot be read or holds invalid values.
    """
    values = _read_yaml(get_config_file_path())

    if repo_root is not None:
        repo_values = _read_yaml(get_repo_config_file_path(repo_root))
        for key in REPO_OVERRIDABLE_KEYS:
            if key in repo_values:
                values[key] = repo_values[key]

    values.update(_env_overrides())

    try:
        return GitlaneConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


def save_config(config: GitlaneConfig) -> None:
    """Save configuration to ~/.gitlane/config.yaml.

    Args:
        config: Configuration to save.
    """
    config_file = get_config_file_path()
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_file}: {e}")


def set_config_value(key: str, value: str) -> GitlaneConfig:
    """Update one key of the global configuration and save it.

    Args:
        key: A GitlaneConfig field name.
        value: The new value as text; pydantic converts it to the field type.

    Returns:
        The saved configuration.

    Raises:
        ConfigError: If the key is unknown or the value invalid.
    """
    if key not in GitlaneConfig.model_fields:
        raise ConfigError(f"Unknown config key: {key}")

    values = _read_yaml(get_config_file_path())
    values[key] = value
    try:
        config = GitlaneConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e}")

    save_config(config)
    return config
