"""
Settings Request
================
The submitted form data handed to ``SettingsManager.save``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class UploadedFile:
    """An uploaded file held in memory."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        """Lower-case extension without the leading dot."""
        return Path(self.filename).suffix.lower().lstrip(".")

    @property
    def size(self) -> int:
        return len(self.content)

    def is_valid(self) -> bool:
        return bool(self.filename)


@dataclass
class SettingsRequest:
    """Submitted values and files, keyed by setting name."""
    values: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, UploadedFile] = field(default_factory=dict)

    def has(self, name: str) -> bool:
        """True when a value or file was submitted for name, even an empty one."""
        return name in self.values or name in self.files

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.values:
            return self.values[name]
        return self.files.get(name, default)

    def has_file(self, name: str) -> bool:
        upload = self.files.get(name)
        return upload is not None and upload.is_valid()

    def file(self, name: str) -> Optional[UploadedFile]:
        return self.files.get(name)

    def all(self) -> Dict[str, Any]:
        """Values and files merged, files taking precedence."""
        data = dict(self.values)
        data.update(self.files)
        return data
