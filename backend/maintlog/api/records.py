"""
Maintenance Record API endpoints - CRUD, filtering and CSV export.
"""

import csv
import io
import logging
import uuid
from datetime import date, datetime, time, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from .deps import get_equipment_storage, get_record_storage, get_session_manager
from ..config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..core.session_manager import SessionManager
from ..models import (
    MaintenanceRecord, RecordView, RecordCreate, RecordUpdate, ItemList, MessageResponse,
)
from ..models.chat import utcnow
from ..storage import EquipmentStorage, RecordStorage
from ..utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["records"])

CSV_HEADER = [
    "ID", "Equipment ID", "Equipment Name", "Symptom", "Cause",
    "Solution", "Created At", "Updated At",
]


class RecordFilters:
    """Query parameters shared by the list and export endpoints."""

    def __init__(
        self,
        equipment_id: Optional[str] = Query(None, description="Only records for this equipment"),
        start_date: Optional[date] = Query(None, description="Created on or after this day (UTC)"),
        end_date: Optional[date] = Query(None, description="Created on or before this day (UTC)"),
        keyword: Optional[str] = Query(None, description="Substring of symptom, cause or solution"),
        limit: Optional[int] = Query(None, ge=1, description="Maximum number of records"),
    ):
        self.equipment_id = equipment_id
        self.start_date = start_date
        self.end_date = end_date
        self.keyword = keyword
        self.limit = limit or settings.records_default_limit

    async def apply(self, record_storage: RecordStorage) -> List[MaintenanceRecord]:
        created_from = None
        created_to = None
        if self.start_date:
            created_from = datetime.combine(self.start_date, time.min, tzinfo=timezone.utc)
        if self.end_date:
            created_to = datetime.combine(self.end_date, time.max, tzinfo=timezone.utc)
        return await record_storage.query(
            equipment_id=self.equipment_id,
            created_from=created_from,
            created_to=created_to,
            keyword=self.keyword,
            limit=self.limit,
        )


async def _with_equipment_names(
    records: List[MaintenanceRecord],
    equipment_storage: EquipmentStorage
) -> List[RecordView]:
    names = {e.id: e.equipment_name for e in await equipment_storage.list()}
    return [
        RecordView(**record.model_dump(), equipment_name=names.get(record.equipment_id))
        for record in records
    ]


async def _require_record(record_storage: RecordStorage, record_id: str) -> MaintenanceRecord:
    record = await record_storage.get(record_id)
    if record is None:
        raise NotFoundError("Record not found")
    return record


@router.get("", response_model=ItemList[RecordView])
async def list_records(
    filters: RecordFilters = Depends(),
    user_id: str = Depends(get_current_user_id),
    record_storage: RecordStorage = Depends(get_record_storage),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    """List records matching the filters, newest first."""
    records = await filters.apply(record_storage)
    return ItemList.of(await _with_equipment_names(records, equipment_storage))


@router.post("", response_model=MaintenanceRecord, status_code=status.HTTP_201_CREATED)
async def create_record(
    request: RecordCreate,
    user_id: str = Depends(get_current_user_id),
    record_storage: RecordStorage = Depends(get_record_storage),
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Save a maintenance record.

    When the record comes from a chat session, that session is marked
    completed and linked to the record.
    """
    now = utcnow()
    record = MaintenanceRecord(
        id=str(uuid.uuid4()),
        **request.model_dump(),
        created_by=user_id,
        created_at=now,
        updated_at=now,
    )
    await record_storage.save(record)
    logger.info(f"User {user_id} created record {record.id} for equipment {record.equipment_id}")

    if record.chat_session_id:
        try:
            await manager.complete_session(record.chat_session_id, user_id, record.id)
        except NotFoundError:
            logger.warning(f"Record {record.id} refers to unknown session {record.chat_session_id}")
        except ConflictError as e:
            logger.error(
                f"Record {record.id} not linked to session: {e.message}",
                extra={"extra_fields": {"record_id": record.id, "session_id": record.chat_session_id}}
            )

    return record


@router.get("/export")
async def export_records(
    filters: RecordFilters = Depends(),
    user_id: str = Depends(get_current_user_id),
    record_storage: RecordStorage = Depends(get_record_storage),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    """Export records matching the filters as CSV."""
    records = await _with_equipment_names(await filters.apply(record_storage), equipment_storage)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow([
            record.id,
            record.equipment_id,
            record.equipment_name or "",
            record.symptom,
            record.cause,
            record.solution,
            record.created_at.isoformat(),
            record.updated_at.isoformat(),
        ])

    filename = f"records_{utcnow().date().isoformat()}.csv"
    logger.info(f"User {user_id} exported {len(records)} records")
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{record_id}", response_model=RecordView)
async def get_record(
    record_id: str,
    user_id: str = Depends(get_current_user_id),
    record_storage: RecordStorage = Depends(get_record_storage),
    equipment_storage: EquipmentStorage = Depends(get_equipment_storage)
):
    record = await _require_record(record_storage, record_id)
    return (await _with_equipment_names([record], equipment_storage))[0]


@router.put("/{record_id}", response_model=MaintenanceRecord)
async def update_record(
    record_id: str,
    request: RecordUpdate,
    user_id: str = Depends(get_current_user_id),
    record_storage: RecordStorage = Depends(get_record_storage)
):
    """Update symptom, cause or solution; omitted fields keep their value."""
    record = await _require_record(record_storage, record_id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    record = record.model_copy(update={**changes, "updated_at": utcnow()})
    await record_storage.save(record)
    return record


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_record(
    record_id: str,
    user_id: str = Depends(get_current_user_id),
    record_storage: RecordStorage = Depends(get_record_storage)
):
    await _require_record(record_storage, record_id)
    await record_storage.delete(record_id)
    logger.info(f"User {user_id} deleted record {record_id}")
    return MessageResponse(message="Record deleted")
