"""
Maintenance Record Models.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .chat import utcnow


class MaintenanceRecord(BaseModel):
    """A saved symptom / cause / solution record."""
    id: str
    equipment_id: str
    symptom: str
    cause: str
    solution: str
    attachment_key: Optional[str] = None
    chat_session_id: Optional[str] = None
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class RecordView(MaintenanceRecord):
    """Record as returned by the API, joined with the equipment name."""
    equipment_name: Optional[str] = None


class RecordCreate(BaseModel):
    equipment_id: str = Field(..., min_length=1)
    symptom: str = Field(..., min_length=1)
    cause: str = Field(..., min_length=1)
    solution: str = Field(..., min_length=1)
    attachment_key: Optional[str] = None
    chat_session_id: Optional[str] = None


class RecordUpdate(BaseModel):
    """Partial update - omitted fields keep their value."""
    symptom: Optional[str] = Field(None, min_length=1)
    cause: Optional[str] = Field(None, min_length=1)
    solution: Optional[str] = Field(None, min_length=1)
