"""Models module."""

from .auth import TokenData
from .chat import (
    REQUIRED_FIELDS, SessionStatus, MessageRole, ChatSession, ChatMessage,
    ExtractedInfo, CreateSessionRequest, SendMessageRequest, SendMessageResponse,
)
from .common import ItemList, MessageResponse
from .equipment import Equipment, EquipmentCreate, EquipmentUpdate
from .files import UploadUrlRequest, UploadUrlResponse, DownloadUrlResponse
from .record import MaintenanceRecord, RecordView, RecordCreate, RecordUpdate

__all__ = [
    'TokenData',
    'REQUIRED_FIELDS', 'SessionStatus', 'MessageRole', 'ChatSession', 'ChatMessage',
    'ExtractedInfo', 'CreateSessionRequest', 'SendMessageRequest', 'SendMessageResponse',
    'ItemList', 'MessageResponse',
    'Equipment', 'EquipmentCreate', 'EquipmentUpdate',
    'UploadUrlRequest', 'UploadUrlResponse', 'DownloadUrlResponse',
    'MaintenanceRecord', 'RecordView', 'RecordCreate', 'RecordUpdate',
]
