"""
Settings Defaults
=================
Built-in settings sections used when no configuration file is present.
"""

import os
from pathlib import Path
from typing import Any, Dict, List


def get_default_disks() -> Dict[str, str]:
    """Disk name to root directory, rooted in DATA_DIR."""
    data_dir = Path(os.getenv("DATA_DIR", "data"))
    return {
        "public": str(data_dir / "public"),
        "local": str(data_dir / "app"),
    }


# Section definitions in display order
DEFAULT_SECTIONS: List[Dict[str, Any]] = [
    {
        "title": "General Settings",
        "descriptions": "Application general settings.",
        "icon": "Settings",
        "inputs": [
            {
                "name": "app_name",
                "type": "text",
                "label": "App Name",
                "placeholder": "Application Name",
                "rules": "required|min:2",
            },
            {
                "name": "logo",
                "type": "image",
                "label": "Upload logo",
                "hint": "Must be an image and cropped in desired size",
                "rules": "image|max:500",
                "disk": "public",
                "path": "app",
            },
        ],
    },
    {
        "title": "Email",
        "descriptions": "How the app sends email.",
        "icon": "Mail",
        "inputs": [
            {
                "name": "from_email",
                "type": "email",
                "label": "From Email",
                "placeholder": "Application from email",
                "rules": "required|email",
            },
            {
                "name": "from_name",
                "type": "text",
                "label": "Email from Name",
                "placeholder": "Email from Name",
            },
            {
                "name": "notify_admins",
                "type": "checkbox",
                "label": "Notify admins on new signups",
                "data_type": "boolean",
                "value": False,
            },
        ],
    },
]


def get_default_config() -> Dict[str, Any]:
    """Raw configuration mapping used when no file is found."""
    return {
        "sections": DEFAULT_SECTIONS,
        "remove_abandoned_settings": False,
        "default_disk": "public",
        "disks": get_default_disks(),
    }
