# App Settings Module
"""
Declarative settings management.
Reads the settings schema, stores values, and reconciles submitted forms.
"""

from .casting import cast_value
from .config import build_config, load_config
from .database import SettingsDB
from .handlers import HandlerNotFoundError, HandlerRegistry
from .request import SettingsRequest, UploadedFile
from .schemas import (
    AppSettingsConfig,
    DataType,
    InlineHook,
    NamedHook,
    SectionValues,
    SettingField,
    SettingSection,
    SettingValue,
)
from .service import (
    SettingsManager,
    get_settings_manager,
    set_settings_manager,
    setting,
)
from .validation import SettingsValidator, ValidationFailed

__all__ = [
    "AppSettingsConfig",
    "DataType",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "InlineHook",
    "NamedHook",
    "SectionValues",
    "SettingField",
    "SettingSection",
    "SettingValue",
    "SettingsDB",
    "SettingsManager",
    "SettingsRequest",
    "SettingsValidator",
    "UploadedFile",
    "ValidationFailed",
    "build_config",
    "cast_value",
    "get_settings_manager",
    "load_config",
    "set_settings_manager",
    "setting",
]
