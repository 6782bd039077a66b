"""
Chat Models - Sessions, messages and the extraction result.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

# Labels of the three required record fields, in report order
REQUIRED_FIELDS = ("symptom", "cause", "solution")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    """Lifecycle: ACTIVE -> COMPLETED once a record is saved from the session."""
    ACTIVE = "active"
    COMPLETED = "completed"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatSession(BaseModel):
    """A bounded conversation about one piece of equipment."""
    id: str
    user_id: str
    equipment_id: str
    title: str
    status: SessionStatus = SessionStatus.ACTIVE
    record_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ChatMessage(BaseModel):
    """One immutable turn of a session."""
    id: str
    session_id: str
    role: MessageRole
    content: str
    attachment_key: Optional[str] = None  # blob key of an attached PDF
    created_at: datetime = Field(default_factory=utcnow)


class ExtractedInfo(BaseModel):
    """
    Maintenance fields extracted from the conversation so far.

    Uses the camelCase keys of the model's JSON contract on the wire;
    snake_case names are accepted when constructing it in code. Model output is
    validated with strict=True, so no type coercion happens there.
    """
    model_config = ConfigDict(populate_by_name=True)

    symptom: Optional[str] = None
    cause: Optional[str] = None
    solution: Optional[str] = None
    is_complete: bool = Field(default=False, alias="isComplete")
    missing_fields: List[str] = Field(default_factory=lambda: list(REQUIRED_FIELDS), alias="missingFields")

    @classmethod
    def from_fields(
        cls,
        symptom: Optional[str] = None,
        cause: Optional[str] = None,
        solution: Optional[str] = None
    ) -> "ExtractedInfo":
        """Build an instance whose completeness flags agree with the fields."""
        values = {}
        for name, value in zip(REQUIRED_FIELDS, (symptom, cause, solution)):
            values[name] = value if value and value.strip() else None
        missing = [name for name in REQUIRED_FIELDS if values[name] is None]
        return cls(**values, is_complete=not missing, missing_fields=missing)

    @classmethod
    def empty(cls) -> "ExtractedInfo":
        return cls.from_fields()


class CreateSessionRequest(BaseModel):
    equipment_id: str = Field(..., min_length=1)
    title: Optional[str] = None


class SendMessageRequest(BaseModel):
    content: str
    attachment_key: Optional[str] = None


class SendMessageResponse(BaseModel):
    """Result of one conversation turn."""
    user_message: ChatMessage
    assistant_message: ChatMessage
    extracted_info: ExtractedInfo
