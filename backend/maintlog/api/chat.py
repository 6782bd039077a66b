"""
Chat API endpoints - Sessions and conversation turns.
"""

from fastapi import APIRouter, Depends, status

from .deps import get_session_manager, get_orchestrator
from ..agents.orchestrator import ConversationOrchestrator
from ..core.session_manager import SessionManager
from ..models import (
    ChatSession, ChatMessage, CreateSessionRequest, SendMessageRequest,
    SendMessageResponse, ItemList, MessageResponse,
)
from ..utils.auth import get_current_user_id

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/sessions", response_model=ItemList[ChatSession])
async def list_sessions(
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager)
):
    """List the caller's sessions, most recent first."""
    return ItemList.of(await manager.list_sessions(user_id))


@router.post("/sessions", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: CreateSessionRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager)
):
    """Start a session; the assistant greeting is seeded as its first message."""
    return await manager.create_session(user_id, request.equipment_id, request.title)


@router.get("/sessions/{session_id}", response_model=ChatSession)
async def get_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager)
):
    return await manager.get_session(session_id, user_id)


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager)
):
    """Delete a session together with its messages."""
    await manager.delete_session(session_id, user_id)
    return MessageResponse(message="Session deleted")


@router.get("/sessions/{session_id}/messages", response_model=ItemList[ChatMessage])
async def list_messages(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    manager: SessionManager = Depends(get_session_manager)
):
    """List a session's messages, oldest first."""
    return ItemList.of(await manager.list_messages(session_id, user_id))


@router.post("/sessions/{session_id}/messages", response_model=SendMessageResponse)
async def send_message(
    session_id: str,
    request: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator)
):
    """
    Send a message and get the assistant's reply.

    Returns:
        Both stored messages and the fields extracted so far
    """
    return await orchestrator.send_turn(
        session_id, user_id, request.content, request.attachment_key
    )
