"""
Record Storage - Maintenance record documents and their filters.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .interface import StorageInterface
from .keys import safe_segment
from ..core.exceptions import StorageError
from ..models import MaintenanceRecord

logger = logging.getLogger(__name__)


class RecordStorage:
    """Stores one JSON document per maintenance record under ``records/``."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.records_dir = "records"

    def _path(self, record_id: str) -> str:
        return f"{self.records_dir}/{safe_segment(record_id)}.json"

    async def save(self, record: MaintenanceRecord) -> MaintenanceRecord:
        if not await self.storage.save(self._path(record.id), record.model_dump_json(indent=2)):
            raise StorageError(f"Failed to save record {record.id}")
        return record

    async def get(self, record_id: str) -> Optional[MaintenanceRecord]:
        content = await self.storage.load(self._path(record_id))
        if content is None:
            return None
        try:
            return MaintenanceRecord.model_validate_json(content)
        except PydanticValidationError as e:
            logger.error(f"Corrupt record document {record_id}: {e}")
            return None

    async def delete(self, record_id: str) -> bool:
        return await self.storage.delete(self._path(record_id))

    async def _load_all(self) -> List[MaintenanceRecord]:
        records = []
        for path in await self.storage.list(self.records_dir, pattern="*.json"):
            content = await self.storage.load(path)
            if content is None:
                continue
            try:
                records.append(MaintenanceRecord.model_validate_json(content))
            except PydanticValidationError as e:
                logger.error(f"Skipping corrupt record document {path}: {e}")
        return records

    async def query(
        self,
        equipment_id: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        keyword: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[MaintenanceRecord]:
        """
        Filter records, newest first.

        Args:
            equipment_id: Only records for this equipment
            created_from: Inclusive lower bound on created_at
            created_to: Inclusive upper bound on created_at
            keyword: Case-insensitive substring of symptom, cause or solution
            limit: Maximum number of records returned

        Returns:
            Matching records
        """
        records = await self._load_all()

        if equipment_id:
            records = [r for r in records if r.equipment_id == equipment_id]
        if created_from:
            records = [r for r in records if r.created_at >= created_from]
        if created_to:
            records = [r for r in records if r.created_at <= created_to]
        if keyword:
            needle = keyword.lower()
            records = [
                r for r in records
                if needle in r.symptom.lower()
                or needle in r.cause.lower()
                or needle in r.solution.lower()
            ]

        records.sort(key=lambda r: r.created_at, reverse=True)
        if limit is not None:
            records = records[:limit]
        return records

    async def has_records_for_equipment(self, equipment_id: str) -> bool:
        return bool(await self.query(equipment_id=equipment_id, limit=1))
