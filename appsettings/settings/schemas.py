"""
Settings Schemas
================
Pydantic models describing the declared setting fields and their sections.
"""

from typing import Any, Callable, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


FILE_TYPES = ("file", "image")


class DataType(str, Enum):
    """Coercion applied when a value moves in or out of storage."""
    ARRAY = "array"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    RAW = "raw"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "DataType":
        """Map a configured data_type tag onto a coercion."""
        aliases = {
            "array": cls.ARRAY,
            "int": cls.INTEGER,
            "integer": cls.INTEGER,
            "number": cls.INTEGER,
            "boolean": cls.BOOLEAN,
            "bool": cls.BOOLEAN,
        }
        if tag is None:
            return cls.RAW
        return aliases.get(str(tag).lower(), cls.RAW)


class InlineHook(BaseModel):
    """Accessor/mutator given directly as a callable ``(value, name) -> value``."""
    model_config = ConfigDict(frozen=True)

    fn: Callable[[Any, str], Any]


class NamedHook(BaseModel):
    """Accessor/mutator given as the name of a registered handler."""
    model_config = ConfigDict(frozen=True)

    handler: str


Hook = Union[InlineHook, NamedHook]


def _to_hook(value: Any) -> Any:
    if value is None or isinstance(value, (InlineHook, NamedHook)):
        return value
    if isinstance(value, str):
        return NamedHook(handler=value)
    if isinstance(value, dict):
        return value
    # Handler classes get a fresh instance per call, like registry entries
    if isinstance(value, type) and hasattr(value, "handle"):
        return InlineHook(fn=lambda v, name: value().handle(v, name))
    if hasattr(value, "handle"):
        return InlineHook(fn=value.handle)
    if callable(value):
        return InlineHook(fn=value)
    return value


class SettingField(BaseModel):
    """A single declared setting.

    Unknown keys (label, hint, placeholder, options, ...) are kept so the
    UI layer can render them.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(..., min_length=1)
    type: str = "text"
    data_type: Optional[str] = None
    value: Any = None
    rules: Optional[str] = None
    accessor: Optional[Hook] = None
    mutator: Optional[Hook] = None
    disk: Optional[str] = None  # For file/image types
    path: str = "/"  # For file/image types

    @field_validator("accessor", "mutator", mode="before")
    @classmethod
    def normalize_hook(cls, v: Any) -> Any:
        return _to_hook(v)

    @property
    def cast_type(self) -> DataType:
        return DataType.from_tag(self.data_type)

    @property
    def is_file(self) -> bool:
        return self.type in FILE_TYPES

    @property
    def extra_attributes(self) -> Dict[str, Any]:
        """UI attributes that are not part of the field contract."""
        return dict(self.model_extra or {})


class SettingSection(BaseModel):
    """A group of settings shown together on the settings page."""
    model_config = ConfigDict(frozen=True, extra="allow")

    title: str = ""
    descriptions: Optional[str] = None
    icon: Optional[str] = None
    inputs: List[SettingField] = []


class AppSettingsConfig(BaseModel):
    """The full settings schema plus behaviour flags."""
    model_config = ConfigDict(frozen=True)

    sections: List[SettingSection] = []
    remove_abandoned_settings: bool = False
    default_disk: str = "public"
    disks: Dict[str, str] = {}
    saved_message: str = "Settings saved."

    @model_validator(mode="after")
    def check_unique_names(self) -> "AppSettingsConfig":
        seen = set()
        for section in self.sections:
            for field in section.inputs:
                if field.name in seen:
                    raise ValueError(f"Duplicate setting name: {field.name}")
                seen.add(field.name)
        return self


class SettingValue(BaseModel):
    """A declared setting together with its current value."""
    name: str
    type: str
    data_type: Optional[str] = None
    value: Any = None
    rules: Optional[str] = None
    attributes: Dict[str, Any] = {}


class SectionValues(BaseModel):
    """A section as rendered on the settings page."""
    title: str
    descriptions: Optional[str] = None
    icon: Optional[str] = None
    settings: List[SettingValue] = []
