"""
Epic and Analytics Models
Request and response models for epic management and analytics endpoints
"""
from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from featuregen.models import EPIC_STATUSES


def _validate_status(v):
    if v is not None and v not in EPIC_STATUSES:
        raise ValueError(f"Unsupported epic status: {v}. Supported statuses: {EPIC_STATUSES}")
    return v


class EpicRequest(BaseModel):
    """Request model for creating an epic"""
    name: str = Field(..., min_length=1, description="Epic name")
    description: Optional[str] = Field(None, description="Epic description")
    status: str = Field("active", description=f"Epic status: {', '.join(EPIC_STATUSES)}")

    @validator('status')
    def validate_status(cls, v):
        return _validate_status(v)


class EpicUpdateRequest(BaseModel):
    """Request model for updating an epic"""
    name: Optional[str] = Field(None, min_length=1, description="Epic name")
    description: Optional[str] = Field(None, description="Epic description")
    status: Optional[str] = Field(None, description="Epic status")

    @validator('status')
    def validate_status(cls, v):
        return _validate_status(v)


class EpicResponse(BaseModel):
    """Response model for epic details"""
    id: int
    name: str
    description: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


class AnalyticsEventResponse(BaseModel):
    """Response model for a recorded generation event"""
    id: int
    event_type: str
    title: Optional[str] = None
    scenario_count: Optional[int] = None
    successful: bool
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
