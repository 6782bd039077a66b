"""
Chat Storage - Sessions and their append-only message logs.

Layout:
    chat/sessions/<user_id>/<session_id>.json
    chat/messages/<session_id>/<timestamp>_<message_id>.json
"""

import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .interface import StorageInterface
from .keys import safe_segment, timestamp_key
from ..core.exceptions import StorageError
from ..models import ChatSession, ChatMessage

logger = logging.getLogger(__name__)


class ChatStorage:
    """
    Persists chat sessions per owner and messages per session.
    Sessions are keyed under their owner, so every lookup is ownership-scoped.
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.sessions_dir = "chat/sessions"
        self.messages_dir = "chat/messages"

    def _session_path(self, user_id: str, session_id: str) -> str:
        return f"{self.sessions_dir}/{safe_segment(user_id)}/{safe_segment(session_id)}.json"

    def _messages_prefix(self, session_id: str) -> str:
        return f"{self.messages_dir}/{safe_segment(session_id)}"

    def _message_path(self, message: ChatMessage) -> str:
        return (
            f"{self._messages_prefix(message.session_id)}/"
            f"{timestamp_key(message.created_at)}_{safe_segment(message.id)}.json"
        )

    async def save_session(self, session: ChatSession) -> ChatSession:
        """Create or replace a session document."""
        path = self._session_path(session.user_id, session.id)
        if not await self.storage.save(path, session.model_dump_json(indent=2)):
            raise StorageError(f"Failed to save session {session.id}")
        return session

    async def get_session(self, user_id: str, session_id: str) -> Optional[ChatSession]:
        """Get a session owned by ``user_id``, or None."""
        content = await self.storage.load(self._session_path(user_id, session_id))
        if content is None:
            return None
        try:
            return ChatSession.model_validate_json(content)
        except PydanticValidationError as e:
            logger.error(f"Corrupt session document {session_id}: {e}")
            return None

    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        """List a user's sessions, most recent first."""
        prefix = f"{self.sessions_dir}/{safe_segment(user_id)}"
        sessions = []
        for path in await self.storage.list(prefix, pattern="*.json"):
            content = await self.storage.load(path)
            if content is None:
                continue
            try:
                sessions.append(ChatSession.model_validate_json(content))
            except PydanticValidationError as e:
                logger.error(f"Skipping corrupt session document {path}: {e}")
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return sessions

    async def delete_session(self, user_id: str, session_id: str) -> bool:
        return await self.storage.delete(self._session_path(user_id, session_id))

    async def append_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to its session log."""
        if not await self.storage.save(self._message_path(message), message.model_dump_json(indent=2)):
            raise StorageError(f"Failed to save message {message.id}")
        return message

    async def list_messages(self, session_id: str) -> List[ChatMessage]:
        """List a session's messages, oldest first."""
        entries = []
        for path in await self.storage.list(self._messages_prefix(session_id), pattern="*.json"):
            content = await self.storage.load(path)
            if content is None:
                continue
            try:
                entries.append((path, ChatMessage.model_validate_json(content)))
            except PydanticValidationError as e:
                logger.error(f"Skipping corrupt message document {path}: {e}")
        # Keys already sort by time; sorting on the parsed timestamp as well
        # keeps the order correct for keys written by other clocks.
        entries.sort(key=lambda entry: (entry[1].created_at, entry[0]))
        return [message for _, message in entries]

    async def delete_messages(self, session_id: str) -> int:
        """Delete every message of a session. Returns the number deleted."""
        deleted = 0
        for path in await self.storage.list(self._messages_prefix(session_id), pattern="*.json"):
            if await self.storage.delete(path):
                deleted += 1
        return deleted
