"""
Settings Protocols
==================
Interfaces the settings manager depends on.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class SettingStorage(Protocol):
    """Key/value persistence for raw setting values."""

    def all(self, fresh: bool = False) -> Dict[str, Any]:
        """Return every stored name and raw value.

        Args:
            fresh: Bypass any caching the store performs
        """
        ...

    def get(self, name: str, default: Any = None) -> Any:
        ...

    def set(self, name: str, value: Any) -> Any:
        ...

    def remove(self, name: str) -> Any:
        ...


@runtime_checkable
class FileStorage(Protocol):
    """File persistence addressed by disk name and path."""

    def store(self, content: bytes, path: str, disk: str, extension: str = "") -> str:
        """Write content under path on disk.

        Returns:
            The stored file path relative to the disk root
        """
        ...

    def exists(self, path: str, disk: str) -> bool:
        ...

    def delete(self, path: str, disk: str) -> None:
        ...


class SettingHandler(Protocol):
    """A named accessor or mutator."""

    def handle(self, value: Any, name: str) -> Any:
        ...


class RequestData(Protocol):
    """A submitted settings form."""

    def has(self, name: str) -> bool:
        ...

    def get(self, name: str, default: Any = None) -> Any:
        ...

    def has_file(self, name: str) -> bool:
        ...

    def file(self, name: str) -> Optional[Any]:
        ...
