"""API module."""

from .chat import router as chat_router
from .equipment import router as equipment_router
from .records import router as records_router
from .files import router as files_router

__all__ = ['chat_router', 'equipment_router', 'records_router', 'files_router']
