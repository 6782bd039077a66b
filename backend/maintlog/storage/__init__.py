"""Storage module - provides interface and implementations for data persistence."""

from .interface import StorageInterface
from .local_storage import LocalStorage
from .chat_storage import ChatStorage
from .equipment_storage import EquipmentStorage
from .record_storage import RecordStorage

__all__ = ['StorageInterface', 'LocalStorage', 'ChatStorage', 'EquipmentStorage', 'RecordStorage']
