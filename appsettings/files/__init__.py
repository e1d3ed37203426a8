# App Settings Files Module
"""Storage for files uploaded through file and image settings."""

from .store import DiskNotConfiguredError, LocalFileStorage

__all__ = [
    "DiskNotConfiguredError",
    "LocalFileStorage",
]
