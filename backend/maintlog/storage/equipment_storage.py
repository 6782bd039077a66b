"""
Equipment Storage - Equipment master data documents.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .interface import StorageInterface
from .keys import safe_segment
from ..core.exceptions import StorageError
from ..models import Equipment

logger = logging.getLogger(__name__)


class EquipmentStorage:
    """Stores one JSON document per equipment under ``equipment/``."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.equipment_dir = "equipment"

    def _path(self, equipment_id: str) -> str:
        return f"{self.equipment_dir}/{safe_segment(equipment_id)}.json"

    async def save(self, equipment: Equipment) -> Equipment:
        if not await self.storage.save(self._path(equipment.id), equipment.model_dump_json(indent=2)):
            raise StorageError(f"Failed to save equipment {equipment.id}")
        return equipment

    async def get(self, equipment_id: str) -> Optional[Equipment]:
        content = await self.storage.load(self._path(equipment_id))
        if content is None:
            return None
        try:
            return Equipment.model_validate_json(content)
        except PydanticValidationError as e:
            logger.error(f"Corrupt equipment document {equipment_id}: {e}")
            return None

    async def list(self) -> List[Equipment]:
        """List all equipment ordered by plant code."""
        items = []
        for path in await self.storage.list(self.equipment_dir, pattern="*.json"):
            content = await self.storage.load(path)
            if content is None:
                continue
            try:
                items.append(Equipment.model_validate_json(content))
            except PydanticValidationError as e:
                logger.error(f"Skipping corrupt equipment document {path}: {e}")
        items.sort(key=lambda e: (e.equipment_id, e.created_at))
        return items

    async def delete(self, equipment_id: str) -> bool:
        return await self.storage.delete(self._path(equipment_id))
