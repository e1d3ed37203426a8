# App Settings API Routers
# ========================
"""API route handlers for app settings."""

from . import settings
from . import storage

__all__ = [
    'settings',
    'storage',
]
