"""
Settings Router
===============
API endpoints for reading and saving application settings.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request
from starlette.datastructures import UploadFile

from appsettings.files import LocalFileStorage
from appsettings.settings import (
    DataType,
    SettingsManager,
    SettingsRequest,
    SettingsValidator,
    UploadedFile,
    ValidationFailed,
    get_settings_manager,
)
from settings_api.models.responses import SaveResponse, SectionsResponse


logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Helpers
# ============================================

async def build_settings_request(request: Request) -> SettingsRequest:
    """Turn a JSON or form submission into a SettingsRequest.

    Repeated form keys and keys ending in ``[]`` become lists.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Expected a JSON object")
        return SettingsRequest(values=body)

    form = await request.form()
    values: Dict[str, Any] = {}
    files: Dict[str, UploadedFile] = {}

    for key in form.keys():
        items = form.getlist(key)
        name = key[:-2] if key.endswith("[]") else key

        uploads = [item for item in items if isinstance(item, UploadFile)]
        if uploads:
            upload = uploads[0]
            if upload.filename:
                files[name] = UploadedFile(
                    filename=upload.filename,
                    content=await upload.read(),
                    content_type=upload.content_type,
                )
            continue

        if key.endswith("[]") or len(items) > 1:
            values[name] = list(items)
        else:
            values[name] = items[0]

    return SettingsRequest(values=values, files=files)


def single_value_errors(manager: SettingsManager, data: Dict[str, Any]) -> Dict[str, List[str]]:
    """Errors for lists or objects sent to fields that store a single value."""
    errors = {}
    for field in manager.get_all_setting_fields():
        if field.is_file or field.mutator is not None or field.cast_type == DataType.ARRAY:
            continue
        if isinstance(data.get(field.name), (list, dict)):
            errors[field.name] = [f"The {field.name} must be a single value."]
    return errors


def file_url(manager: SettingsManager, disk: str, path: Any):
    if isinstance(manager.files, LocalFileStorage) and isinstance(path, str):
        return manager.files.url(path, disk)
    return None


# ============================================
# Endpoints
# ============================================

@router.get("", response_model=SectionsResponse)
async def get_all_settings():
    """Get every settings section with current values."""
    manager = get_settings_manager()
    sections = manager.get_settings_by_section()

    for section in sections:
        for item in section.settings:
            field = manager.get_setting_field(item.name)
            if field is not None and field.is_file:
                disk = field.disk or manager.config.default_disk
                item.attributes["url"] = file_url(manager, disk, item.value)

    return SectionsResponse(sections=sections)


@router.get("/rules")
async def get_validation_rules():
    """Get validation rules keyed by setting name."""
    manager = get_settings_manager()
    return {
        "success": True,
        "data": manager.get_validation_rules(),
        "meta": {"timestamp": datetime.now().isoformat()}
    }


@router.get("/{name}")
async def get_setting(name: str):
    """Get a single setting value."""
    manager = get_settings_manager()

    if manager.get_setting_field(name) is None:
        raise HTTPException(status_code=404, detail=f"Setting not found: {name}")

    return {
        "success": True,
        "data": {
            "name": name,
            "value": manager.get(name),
        },
        "meta": {"timestamp": datetime.now().isoformat()}
    }


@router.post("", response_model=SaveResponse)
async def save_settings(request: Request):
    """Validate and save submitted settings.

    Accepts multipart/form-data (needed for file and image settings),
    urlencoded forms or a JSON object.
    """
    manager = get_settings_manager()
    settings_request = await build_settings_request(request)
    data = settings_request.all()

    errors = SettingsValidator(manager.get_validation_rules()).errors(data)
    for name, messages in single_value_errors(manager, data).items():
        errors.setdefault(name, []).extend(messages)

    if errors:
        failure = ValidationFailed(errors)
        raise HTTPException(
            status_code=422,
            detail={
                "code": "VALIDATION_ERROR",
                "message": str(failure),
                "errors": failure.errors,
            }
        )

    manager.save(settings_request)
    logger.info(f"Saved settings: {', '.join(sorted(settings_request.all())) or 'none'}")

    return SaveResponse(success=True, message=manager.config.saved_message)


@router.delete("/{name}")
async def remove_setting(name: str):
    """Remove a stored setting value."""
    manager = get_settings_manager()

    if not manager.remove(name):
        raise HTTPException(status_code=404, detail=f"Setting not stored: {name}")

    return {
        "success": True,
        "message": f"Setting {name} removed",
        "meta": {"timestamp": datetime.now().isoformat()}
    }
