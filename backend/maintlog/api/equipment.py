"""
Equipment API endpoints - Equipment master data.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status

from .deps import get_equipment_storage, get_record_storage
from ..core.exceptions import NotFoundError, ValidationError
from ..models import Equipment, EquipmentCreate, EquipmentUpdate, ItemList, MessageResponse
from ..models.chat import utcnow
from ..storage import EquipmentStorage, RecordStorage
from ..utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/equipment", tags=["equipment"])


async def _require_equipment(equipment_storage: EquipmentStorage, equipment_id: str) -> Equipment:
    equipment = await equipment_storage.get(equipment_id)
    if equipment is None:
        raise NotFoundError("Equipment not found")
    return equipment


@router.get("", response_model=ItemList[Equipment])
async def list_equipment(
    user_id: str = Depends(get_current_user_id),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    """List all equipment ordered by equipment code."""
    return ItemList.of(await equipment_storage.list())


@router.post("", response_model=Equipment, status_code=status.HTTP_201_CREATED)
async def create_equipment(
    request: EquipmentCreate,
    user_id: str = Depends(get_current_user_id),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    now = utcnow()
    equipment = Equipment(
        id=str(uuid.uuid4()),
        equipment_id=request.equipment_id,
        equipment_name=request.equipment_name,
        created_at=now,
        updated_at=now,
    )
    await equipment_storage.save(equipment)
    logger.info(f"User {user_id} created equipment {equipment.id} ({equipment.equipment_id})")
    return equipment


@router.get("/{equipment_id}", response_model=Equipment)
async def get_equipment(
    equipment_id: str,
    user_id: str = Depends(get_current_user_id),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    return await _require_equipment(equipment_storage, equipment_id)


@router.put("/{equipment_id}", response_model=Equipment)
async def update_equipment(
    equipment_id: str,
    request: EquipmentUpdate,
    user_id: str = Depends(get_current_user_id),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    """Update the given fields; omitted fields keep their value."""
    equipment = await _require_equipment(equipment_storage, equipment_id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    equipment = equipment.model_copy(update={**changes, "updated_at": utcnow()})
    await equipment_storage.save(equipment)
    return equipment


@router.delete("/{equipment_id}", response_model=MessageResponse)
async def delete_equipment(
    equipment_id: str,
    user_id: str = Depends(get_current_user_id),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage),
    record_storage: RecordStorage = Depends(get_record_storage)
):
    """Delete equipment that no maintenance record refers to."""
    await _require_equipment(equipment_storage, equipment_id)

    if await record_storage.has_records_for_equipment(equipment_id):
        raise ValidationError("Cannot delete equipment that has maintenance records")

    await equipment_storage.delete(equipment_id)
    logger.info(f"User {user_id} deleted equipment {equipment_id}")
    return MessageResponse(message="Equipment deleted")
