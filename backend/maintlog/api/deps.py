"""
Shared API dependencies.

Routers receive storage, the LLM provider and the services built on them
through ``Depends`` so tests can swap any of them with
``app.dependency_overrides``.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from ..agents.orchestrator import ConversationOrchestrator
from ..config import settings
from ..core.session_manager import SessionManager
from ..llm.base import LLMProvider
from ..llm.factory import create_llm_provider
from ..services.attachments import StorageAttachmentResolver
from ..storage import StorageInterface, LocalStorage, ChatStorage, EquipmentStorage, RecordStorage

logger = logging.getLogger(__name__)


@lru_cache
def get_storage() -> StorageInterface:
    """Process-wide storage backend."""
    return LocalStorage(settings.local_storage_path)


@lru_cache
def get_llm_provider() -> Optional[LLMProvider]:
    """Configured LLM provider, or None when no API key is set."""
    provider = create_llm_provider(
        provider=settings.llm_provider,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        default_temperature=settings.llm_temperature,
        default_max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
    )
    if provider is None:
        logger.warning("LLM_API_KEY is not set; chat turns will fail until it is configured")
    return provider


def get_chat_storage(storage: StorageInterface = Depends(get_storage)) -> ChatStorage:
    return ChatStorage(storage)


def get_equipment_storage(storage: StorageInterface = Depends(get_storage)) -> EquipmentStorage:
    return EquipmentStorage(storage)


def get_record_storage(storage: StorageInterface = Depends(get_storage)) -> RecordStorage:
    return RecordStorage(storage)


def get_session_manager(chat_storage: ChatStorage = Depends(get_chat_storage)) -> SessionManager:
    return SessionManager(
        chat_storage,
        greeting=settings.greeting_message,
        default_title=settings.default_session_title,
    )


def get_orchestrator(
    chat_storage: ChatStorage = Depends(get_chat_storage),
    storage: StorageInterface = Depends(get_storage),
    llm_provider: Optional[LLMProvider] = Depends(get_llm_provider),
) -> ConversationOrchestrator:
    return ConversationOrchestrator(
        chat_storage,
        llm_provider=llm_provider,
        attachment_resolver=StorageAttachmentResolver(storage),
        max_tokens=settings.llm_max_tokens,
    )
