"""
Session Manager - Chat session lifecycle.

A session starts ``active`` with a seeded assistant greeting and moves to
``completed`` once a maintenance record is saved from it. Deletion cascades
to the session's messages.
"""

import logging
import uuid
from typing import List, Optional

from .exceptions import ConflictError, NotFoundError, StorageError
from ..models import ChatSession, ChatMessage, MessageRole, SessionStatus
from ..models.chat import utcnow
from ..storage import ChatStorage

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, completes, lists and deletes a user's chat sessions."""

    def __init__(self, chat_storage: ChatStorage, greeting: str, default_title: str):
        self.chat_storage = chat_storage
        self.greeting = greeting
        self.default_title = default_title

    async def _require_session(self, session_id: str, user_id: str) -> ChatSession:
        session = await self.chat_storage.get_session(user_id, session_id)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    async def create_session(
        self,
        user_id: str,
        equipment_id: str,
        title: Optional[str] = None
    ) -> ChatSession:
        """
        Create a session and seed it with the assistant greeting.

        Args:
            user_id: Owner of the session
            equipment_id: Equipment the conversation is about
            title: Optional title; the configured default otherwise

        Returns:
            The new session
        """
        now = utcnow()
        session = ChatSession(
            id=str(uuid.uuid4()),
            user_id=user_id,
            equipment_id=equipment_id,
            title=title or self.default_title,
            status=SessionStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        await self.chat_storage.save_session(session)

        greeting = ChatMessage(
            id=str(uuid.uuid4()),
            session_id=session.id,
            role=MessageRole.ASSISTANT,
            content=self.greeting,
            created_at=now,
        )
        try:
            await self.chat_storage.append_message(greeting)
        except StorageError as e:
            logger.error(
                f"Session {session.id} created without greeting: {e.message}",
                extra={"extra_fields": {"session_id": session.id, "user_id": user_id}}
            )

        logger.info(f"Created session {session.id} for user {user_id} (equipment {equipment_id})")
        return session

    async def get_session(self, session_id: str, user_id: str) -> ChatSession:
        return await self._require_session(session_id, user_id)

    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        return await self.chat_storage.list_sessions(user_id)

    async def list_messages(self, session_id: str, user_id: str) -> List[ChatMessage]:
        """List a session's messages, oldest first."""
        await self._require_session(session_id, user_id)
        return await self.chat_storage.list_messages(session_id)

    async def complete_session(self, session_id: str, user_id: str, record_id: str) -> ChatSession:
        """
        Mark a session completed and link it to the saved record.

        Completing again with the same record is a no-op.

        Raises:
            NotFoundError: If the session does not exist for this user
            ConflictError: If the session is already linked to another record
        """
        session = await self._require_session(session_id, user_id)

        if session.status == SessionStatus.COMPLETED:
            if session.record_id == record_id:
                return session
            raise ConflictError(
                f"Session {session_id} is already linked to record {session.record_id}"
            )

        session = session.model_copy(update={
            "status": SessionStatus.COMPLETED,
            "record_id": record_id,
            "updated_at": utcnow(),
        })
        await self.chat_storage.save_session(session)
        logger.info(f"Completed session {session_id} with record {record_id}")
        return session

    async def delete_session(self, session_id: str, user_id: str) -> None:
        """Delete a session and all of its messages."""
        await self._require_session(session_id, user_id)
        deleted = await self.chat_storage.delete_messages(session_id)
        await self.chat_storage.delete_session(user_id, session_id)
        logger.info(f"Deleted session {session_id} ({deleted} messages)")
