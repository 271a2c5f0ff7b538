"""Configuration loading utilities.

YAML values may reference environment variables as ``${NAME}`` or
``${NAME:-default}``; they are substituted when the file is loaded.
"""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def get_project_root() -> Path:
    """Directory holding ``pyproject.toml``, or the working directory."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


def substitute_env_vars(value: Any) -> Any:
    """Recursively replace ``${NAME}`` / ``${NAME:-default}`` in strings.

    Unset variables without a default become empty strings.
    """
    if isinstance(value, str):
        def replace_match(match: re.Match) -> str:
            env_value = os.getenv(match.group(1))
            if env_value is not None:
                return env_value
            return match.group(2) or ""

        return _ENV_VAR_PATTERN.sub(replace_match, value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def load_config(config_path: str | Path, substitute_env: bool = True) -> dict[str, Any]:
    """Load a YAML configuration file.

    Args:
        config_path: Path to the YAML file (absolute, or relative to the
            working directory or the project root)
        substitute_env: Expand environment variable references

    Returns:
        The configuration mapping; an empty file yields ``{}``

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the file holds something other than a mapping
        yaml.YAMLError: If the config file is invalid YAML
    """
    path = Path(config_path)
    if not path.is_absolute() and not path.exists():
        path = get_project_root() / path

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    return substitute_env_vars(data) if substitute_env else data


def merge_configs(*configs: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Deep merge configuration dictionaries; later ones win, None is skipped."""
    result: dict[str, Any] = {}
    for config in configs:
        if config:
            _deep_merge(result, config)
    return result


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


class BaseConfig(BaseModel):
    """Pydantic model loadable from YAML."""

    class Config:
        extra = "allow"

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> "BaseConfig":
        """Load a YAML file; keyword overrides that are not None take precedence."""
        return cls(**merge_configs(
            load_config(path),
            {k: v for k, v in overrides.items() if v is not None},
        ))
