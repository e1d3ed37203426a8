"""
Settings Configuration
======================
Load the settings schema from a JSON file.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .defaults import get_default_config, get_default_disks
from .schemas import AppSettingsConfig

logger = logging.getLogger(__name__)


# Default search paths for configuration
DEFAULT_CONFIG_PATHS: List[Path] = [
    Path("app_settings.json"),
    Path("config/app_settings.json"),
    Path("~/.config/appsettings/app_settings.json").expanduser(),
]


def build_config(data: Dict[str, Any]) -> AppSettingsConfig:
    """Validate a raw configuration mapping.

    Raises:
        RuntimeError: If the mapping does not describe a valid schema
    """
    data = dict(data or {})
    data.setdefault("disks", get_default_disks())

    try:
        return AppSettingsConfig.model_validate(data)
    except ValidationError as err:
        raise RuntimeError(f"Invalid settings configuration:\n{err}") from err


def load_config(path: Optional[Path] = None) -> AppSettingsConfig:
    """Load the settings schema.

    Args:
        path: Path to a JSON config file. When omitted, APP_SETTINGS_CONFIG
            and then the default search paths are tried.

    Returns:
        Validated AppSettingsConfig. Falls back to the built-in sections
        when no file is found.

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
        RuntimeError: If the file cannot be parsed or is invalid
    """
    if path is None:
        env_path = os.environ.get("APP_SETTINGS_CONFIG")
        if env_path:
            path = Path(env_path)
            if not path.exists():
                raise FileNotFoundError(f"Config file from APP_SETTINGS_CONFIG not found: {path}")
        else:
            for default_path in DEFAULT_CONFIG_PATHS:
                if default_path.exists():
                    path = default_path
                    break
            else:
                logger.warning("No settings config file found, using default sections")
                return build_config(get_default_config())

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings config file not found: {path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Unable to read settings config {path}: {exc}") from exc

    logger.info(f"Loaded settings config from {path}")
    return build_config(data)
