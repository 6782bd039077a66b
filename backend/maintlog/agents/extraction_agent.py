"""
Record Extraction Agent - Gathers symptom, cause and solution through chat.
"""

import logging
from typing import Dict, Any, Optional, List

from .base_agent import BaseAgent
from .response_parser import ModelReply, parse_model_reply
from ..llm.base import LLMMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an assistant that collects and organizes equipment maintenance records.

## Role
Collect information about an equipment problem from the user and organize it into exactly three fields:
- symptom: the problem or abnormality that occurred on the equipment
- cause: why the problem occurred
- solution: the action taken to resolve the problem

## Rules
1. **No guessing**: Never fill in information the user has not explicitly stated.
2. **Ask**: When information is missing, ask specific questions to obtain it.
3. **Formal technical style**: Write the extracted fields in a formal, objective register.
   - Use plain declarative sentences
   - Be concise, clear and objective
   - Use technical terms appropriately
4. **Confirm**: Once you judge that all three fields are known, present the organized content and ask
   "Shall I save the record with this content?"

## Output format
Always respond with exactly the following JSON object. Do not put any text before or after the JSON:
{
  "message": "your reply to the user",
  "extractedInfo": {
    "symptom": "extracted symptom, or null if still unknown",
    "cause": "extracted cause, or null if still unknown",
    "solution": "extracted solution, or null if still unknown",
    "isComplete": false,
    "missingFields": ["names of the fields that are still unknown, from: symptom, cause, solution"]
  }
}

## Attached documents
When a document is attached, read its content. It may be inaccurate or incomplete, so ask the user to
confirm or correct anything you take from it."""

ATTACHMENT_HEADER = "[Attached document]"
MESSAGE_HEADER = "[User message]"


def with_attachment(content: str, attachment_text: str) -> str:
    """Prefix attachment text onto a user message, document first."""
    return f"{ATTACHMENT_HEADER}\n{attachment_text}\n\n{MESSAGE_HEADER}\n{content}"


class RecordExtractionAgent(BaseAgent):
    """
    Drives the gather -> confirm conversation and extracts the three
    maintenance fields from the model's structured reply.
    """

    def __init__(self, temperature: Optional[float] = None, max_tokens: Optional[int] = None):
        super().__init__("RecordExtractionAgent", SYSTEM_PROMPT, temperature, max_tokens)

    def build_turns(
        self,
        turns: List[LLMMessage],
        attachment_text: Optional[str] = None
    ) -> List[LLMMessage]:
        """
        Copy the turns, inlining attachment text into the last user turn.

        Stored history is never modified; the prefix only exists in the
        request sent to the model.
        """
        prepared = [LLMMessage.text(t.role, t.content) for t in turns]
        if attachment_text and prepared and prepared[-1].role == "user":
            prepared[-1] = LLMMessage.text("user", with_attachment(prepared[-1].content, attachment_text))
        return prepared

    async def process_request(
        self,
        turns: List[LLMMessage],
        context: Optional[Dict[str, Any]] = None
    ) -> ModelReply:
        """
        Run one extraction turn.

        Args:
            turns: Full history, oldest first, ending with the new user turn
            context: Optional {"attachment_text": str}

        Returns:
            Parsed model reply (never raises on malformed model output)

        Raises:
            UpstreamFailure: If the model call fails
        """
        attachment_text = (context or {}).get("attachment_text")
        raw = await self.call_llm(self.build_turns(turns, attachment_text))
        reply = parse_model_reply(raw)

        logger.info(
            f"Extraction turn finished: complete={reply.extracted_info.is_complete}, "
            f"missing={reply.extracted_info.missing_fields}"
        )
        return reply
