"""
Equipment Models - Equipment master data.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .chat import utcnow


class Equipment(BaseModel):
    """Equipment master entry."""
    id: str
    equipment_id: str  # plant-assigned code
    equipment_name: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class EquipmentCreate(BaseModel):
    equipment_id: str = Field(..., min_length=1)
    equipment_name: str = Field(..., min_length=1)


class EquipmentUpdate(BaseModel):
    """Partial update - omitted fields keep their value."""
    equipment_id: Optional[str] = Field(None, min_length=1)
    equipment_name: Optional[str] = Field(None, min_length=1)
