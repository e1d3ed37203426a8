# App Settings
# ============
"""Schema-driven application settings with pluggable storage."""

from .settings import SettingsManager, get_settings_manager, setting

__version__ = "1.0.0"

__all__ = ["SettingsManager", "get_settings_manager", "setting"]
