"""
Settings Service
================
Business logic layer for settings management.
"""

import logging
from typing import Any, Dict, List, Optional

from .casting import cast_value
from .config import load_config
from .database import SettingsDB
from .handlers import HandlerRegistry
from .protocols import FileStorage, RequestData, SettingStorage
from .schemas import (
    AppSettingsConfig,
    SectionValues,
    SettingField,
    SettingValue,
)
from ..files.store import LocalFileStorage

logger = logging.getLogger(__name__)

REMOVE_FILE_PREFIX = "remove_file_"


# Singleton instance
_settings_manager: Optional["SettingsManager"] = None


def get_settings_manager() -> "SettingsManager":
    """Get or create the global settings manager instance."""
    global _settings_manager
    if _settings_manager is None:
        config = load_config()
        _settings_manager = SettingsManager(
            config=config,
            storage=SettingsDB(),
            files=LocalFileStorage(config.disks),
            handlers=HandlerRegistry(),
        )
    return _settings_manager


def set_settings_manager(manager: Optional["SettingsManager"]):
    """Replace the global settings manager (None resets it)."""
    global _settings_manager
    _settings_manager = manager


def setting(name: str, default: Any = None) -> Any:
    """Shortcut for ``get_settings_manager().get(name, default)``."""
    return get_settings_manager().get(name, default)


class SettingsManager:
    """Read, write and reconcile settings declared in the schema."""

    def __init__(
        self,
        config: AppSettingsConfig,
        storage: SettingStorage,
        files: Optional[FileStorage] = None,
        handlers: Optional[HandlerRegistry] = None,
    ):
        """Initialize the settings manager.

        Args:
            config: Settings schema and flags
            storage: Key/value store holding raw values
            files: File storage used by file and image fields
            handlers: Registry for named accessors and mutators
        """
        self.config = config
        self.storage = storage
        self.files = files
        self.handlers = handlers or HandlerRegistry()

    def all(self, fresh: bool = False) -> Dict[str, Any]:
        """Get all raw settings from storage."""
        return self.storage.all(fresh)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a setting and cast the value.

        This is the primary method for other modules to read settings.

        Args:
            name: Setting name
            default: Returned when nothing is stored and the field
                declares no default value

        Returns:
            The cast value, or the accessor's result when one is declared
        """
        field = self.get_setting_field(name)
        if field is None:
            return self.storage.get(name, default)

        fallback = field.value if field.value is not None else default
        value = cast_value(field.cast_type, self.storage.get(name, fallback), out=True)

        if field.accessor is not None:
            value = self.handlers.run(field.accessor, name, value)

        return value

    def set(self, name: str, value: Any) -> Any:
        """Cast and store a setting.

        A declared mutator receives the value as passed in, before casting,
        and its result is stored instead.
        """
        field = self.get_setting_field(name)
        if field is None:
            return self.storage.set(name, value)

        stored = cast_value(field.cast_type, value)
        if field.mutator is not None:
            stored = self.handlers.run(field.mutator, name, value)

        logger.debug(f"Setting {name}")
        return self.storage.set(name, stored)

    def remove(self, name: str) -> Any:
        """Remove a setting from storage."""
        return self.storage.remove(name)

    def save(self, request: RequestData):
        """Save a submitted settings form.

        Every declared field is visited in schema order. File and image
        fields without a mutator go through the upload handling, checkboxes
        are always written (absent means unchecked), and other fields are
        written only when submitted.
        """
        fields = self.get_all_setting_fields()

        for field in fields:
            if field.is_file and field.mutator is None:
                self.upload_file(field, request)
            elif request.has(field.name) or field.type == "checkbox":
                self.set(field.name, request.get(field.name))

        self.clean_up_settings(fields)

    def clean_up_settings(self, fields: List[SettingField]) -> List[str]:
        """Remove stored settings that are no longer declared.

        Does nothing unless remove_abandoned_settings is enabled.

        Returns:
            Names that were removed
        """
        if not self.config.remove_abandoned_settings:
            return []

        declared = {field.name for field in fields}
        abandoned = [name for name in self.storage.all(True) if name not in declared]

        for name in abandoned:
            self.remove(name)

        if abandoned:
            logger.info(f"Removed {len(abandoned)} abandoned settings: {', '.join(abandoned)}")
        return abandoned

    def upload_file(self, field: SettingField, request: RequestData) -> Optional[str]:
        """Store a newly uploaded file or remove the current one.

        The new file is stored and recorded before the old file is deleted.

        Returns:
            Path of the newly stored file, or None
        """
        name = field.name
        disk = field.disk or self.config.default_disk
        old_file = self.get(name)

        if request.has_file(name):
            if self.files is None:
                raise RuntimeError(f"No file storage configured for setting {name}")

            upload = request.file(name)
            uploaded_path = self.files.store(upload.content, field.path, disk, upload.extension)
            self.set(name, uploaded_path)
            logger.info(f"Uploaded {upload.filename} for {name} to {disk}:{uploaded_path}")

            self.delete_file(old_file, disk)
            return uploaded_path

        if request.has(REMOVE_FILE_PREFIX + name):
            self.delete_file(old_file, disk)
            self.set(name, None)

        return None

    def delete_file(self, path: Optional[str], disk: str):
        """Delete a stored file if it exists."""
        if path and self.files is not None and self.files.exists(path, disk):
            self.files.delete(path, disk)

    def get_all_setting_fields(self) -> List[SettingField]:
        """Get all fields from all sections, in declaration order."""
        return [field for section in self.config.sections for field in section.inputs]

    def get_setting_field(self, name: str) -> Optional[SettingField]:
        """Get a single field, or None if it is not declared."""
        for field in self.get_all_setting_fields():
            if field.name == name:
                return field
        return None

    def get_validation_rules(self) -> Dict[str, str]:
        """Build validation rules keyed by setting name.

        Fields without rules are left out.
        """
        return {
            field.name: field.rules
            for field in self.get_all_setting_fields()
            if field.rules is not None
        }

    def get_settings_by_section(self) -> List[SectionValues]:
        """Get every section with the current value of each field.

        Returns:
            List of SectionValues in declaration order
        """
        sections = []
        for section in self.config.sections:
            settings = [
                SettingValue(
                    name=field.name,
                    type=field.type,
                    data_type=field.data_type,
                    value=self.get(field.name),
                    rules=field.rules,
                    attributes=field.extra_attributes,
                )
                for field in section.inputs
            ]
            sections.append(SectionValues(
                title=section.title,
                descriptions=section.descriptions,
                icon=section.icon,
                settings=settings,
            ))
        return sections
