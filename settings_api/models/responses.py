# App Settings API Response Models
# ================================
"""Pydantic models for API responses."""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime

from appsettings.settings import SectionValues


# ============================================
# Base Response Models
# ============================================

class MetaInfo(BaseModel):
    """Response metadata."""
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


# ============================================
# Settings Responses
# ============================================

class SectionsResponse(BaseModel):
    """All settings sections with current values."""
    success: bool = True
    sections: List[SectionValues]
    meta: MetaInfo = Field(default_factory=MetaInfo)


class SaveResponse(BaseModel):
    """Response after saving submitted settings."""
    success: bool
    message: str
    meta: MetaInfo = Field(default_factory=MetaInfo)


# ============================================
# System Responses
# ============================================

class HealthStatus(BaseModel):
    """Service health status."""
    status: str  # healthy, unhealthy
    service: str = "appsettings-api"
    settings_declared: int = 0
