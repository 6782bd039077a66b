"""
Conversation Orchestrator - Runs one chat turn end to end.
"""

import logging
import uuid
from datetime import timedelta
from typing import Optional

from .extraction_agent import RecordExtractionAgent
from ..core.exceptions import NotFoundError, ValidationError
from ..llm.base import LLMProvider, LLMMessage
from ..models import ChatMessage, MessageRole, SendMessageResponse
from ..models.chat import utcnow
from ..services.attachments import AttachmentResolver
from ..storage import ChatStorage

logger = logging.getLogger(__name__)


class ConversationOrchestrator:
    """
    Coordinates history, attachment, model call, parsing and persistence
    for a single turn. Holds no state between turns; every call names its
    session explicitly.
    """

    def __init__(self, chat_storage: ChatStorage,
                 llm_provider: Optional[LLMProvider] = None,
                 attachment_resolver: Optional[AttachmentResolver] = None,
                 temperature: Optional[float] = None,
                 max_tokens: Optional[int] = None):
        """
        Args:
            chat_storage: Session and message store
            llm_provider: Model gateway; turns fail with UpstreamFailure without one
            attachment_resolver: Optional document text resolver
            temperature: Sampling temperature for the extraction agent
            max_tokens: Output size limit for the extraction agent
        """
        self.chat_storage = chat_storage
        self.attachment_resolver = attachment_resolver
        self.agent = RecordExtractionAgent(temperature=temperature, max_tokens=max_tokens)
        if llm_provider:
            self.agent.set_llm_provider(llm_provider)

    async def _resolve_attachment(self, attachment_key: Optional[str]) -> Optional[str]:
        """Best effort: any failure means the turn proceeds without the document."""
        if not attachment_key or self.attachment_resolver is None:
            return None
        try:
            return await self.attachment_resolver.resolve(attachment_key)
        except Exception as e:
            logger.warning(
                f"Ignoring attachment {attachment_key}: {str(e)}",
                extra={"extra_fields": {"attachment_key": attachment_key, "error": str(e)}}
            )
            return None

    async def send_turn(
        self,
        session_id: str,
        user_id: str,
        content: str,
        attachment_key: Optional[str] = None
    ) -> SendMessageResponse:
        """
        Send a user message and get the assistant's reply.

        Args:
            session_id: Session owned by ``user_id``
            user_id: Caller identity
            content: User message text
            attachment_key: Optional uploaded document to include

        Returns:
            Both persisted messages and the extraction result

        Raises:
            ValidationError: If content is empty
            NotFoundError: If the session does not exist for this user
            UpstreamFailure: If the model call fails (nothing is persisted)
        """
        if not content or not content.strip():
            raise ValidationError("Message content is required")

        session = await self.chat_storage.get_session(user_id, session_id)
        if session is None:
            raise NotFoundError("Session not found")

        logger.info(f"Processing turn for session {session_id}: {content[:100]}")

        history = await self.chat_storage.list_messages(session_id)
        turns = [LLMMessage.text(m.role.value, m.content) for m in history]
        turns.append(LLMMessage.text(MessageRole.USER.value, content))

        attachment_text = await self._resolve_attachment(attachment_key)

        reply = await self.agent.process_request(turns, {"attachment_text": attachment_text})

        user_message = ChatMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            role=MessageRole.USER,
            content=content,
            attachment_key=attachment_key,
            created_at=utcnow(),
        )
        await self.chat_storage.append_message(user_message)

        # The reply must sort after the user turn even within one clock tick
        assistant_created_at = max(utcnow(), user_message.created_at + timedelta(microseconds=1))
        assistant_message = ChatMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            role=MessageRole.ASSISTANT,
            content=reply.message,
            created_at=assistant_created_at,
        )
        await self.chat_storage.append_message(assistant_message)

        return SendMessageResponse(
            user_message=user_message,
            assistant_message=assistant_message,
            extracted_info=reply.extracted_info,
        )
