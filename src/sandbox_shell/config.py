"""User configuration loaded from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

# Default state location
STATE_DIR = Path.home() / ".sandbox-shell"

CONFIG_FILENAME = "config.yaml"


class ConfigError(Exception):
    """Configuration file could not be read or validated."""

    pass


class ShellConfig(BaseModel):
    """Cosmetic identity and storage settings.

    Args:
        user: Name shown in the prompt, by whoami and as owner in ls -l.
        hostname: Host name shown in the prompt.
        state_dir: Directory holding the saved session (None for the default).
    """

    user: str = "user"
    hostname: str = "training"
    state_dir: Path | None = None

    def resolved_state_dir(self) -> Path:
        """Return the configured state directory or the default."""
        return self.state_dir or STATE_DIR


def default_config_path() -> Path:
    """Location of the config file inside the default state directory."""
    return STATE_DIR / CONFIG_FILENAME


def load_config(path: Path | None = None) -> ShellConfig:
    """Load configuration from a YAML file.

    Args:
        path: Config file to read. Defaults to ~/.sandbox-shell/config.yaml.

    Returns:
        Parsed ShellConfig, or defaults if the file doesn't exist.

    Raises:
        ConfigError: If the YAML is malformed or values are invalid.
    """
    path = path or default_config_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return ShellConfig()

    try:
        data: Any = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}")

    try:
        return ShellConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def save_config(config: ShellConfig, path: Path | None = None) -> None:
    """Write configuration to a YAML file.

    Args:
        config: Configuration to save.
        path: Destination file. Defaults to ~/.sandbox-shell/config.yaml.
    """
    path = path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False))
