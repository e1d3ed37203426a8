"""
Pytest fixtures for app settings tests.
"""

import sys
import pytest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from appsettings.files import LocalFileStorage
from appsettings.settings import SettingsDB, SettingsManager, build_config


SAMPLE_SECTIONS = [
    {
        "title": "General",
        "inputs": [
            {"name": "site_title", "type": "text", "data_type": "string", "rules": "required|min:2"},
            {"name": "max_items", "type": "number", "data_type": "int", "value": 10, "rules": "integer|min:1"},
            {"name": "tags", "type": "text", "data_type": "array"},
        ],
    },
    {
        "title": "Appearance",
        "inputs": [
            {"name": "enabled", "type": "checkbox", "data_type": "boolean", "label": "Enabled"},
            {"name": "logo", "type": "image", "disk": "public", "path": "logos", "rules": "image|max:500"},
        ],
    },
]


def make_sections(*inputs, title="Section"):
    """Build a single-section schema from field mappings."""
    return [{"title": title, "inputs": list(inputs)}]


@pytest.fixture
def disks(tmp_path):
    return {
        "public": str(tmp_path / "public"),
        "local": str(tmp_path / "app"),
    }


@pytest.fixture
def settings_db(tmp_path):
    """Create a SettingsDB in a temporary directory."""
    return SettingsDB(str(tmp_path / "settings.db"))


@pytest.fixture
def file_storage(disks):
    return LocalFileStorage(disks)


@pytest.fixture
def make_manager(settings_db, file_storage, disks):
    """Factory building a SettingsManager over the temporary stores."""
    def _make(sections=None, files=None, handlers=None, **flags):
        config = build_config({
            "sections": SAMPLE_SECTIONS if sections is None else sections,
            "disks": disks,
            **flags,
        })
        return SettingsManager(
            config=config,
            storage=settings_db,
            files=file_storage if files is None else files,
            handlers=handlers,
        )
    return _make


@pytest.fixture
def manager(make_manager):
    return make_manager()
