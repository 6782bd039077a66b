"""
Response Parser - Turns raw model output into a reply and an extraction result.

Model output is untrusted text. It is parsed strictly against the JSON
contract of the extraction prompt; anything else degrades to passing the raw
text through with an empty extraction.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models import ExtractedInfo

logger = logging.getLogger(__name__)


class ExtractedInfoContract(BaseModel):
    """``extractedInfo`` exactly as the prompt specifies it: every key required, camelCase only."""
    model_config = ConfigDict(strict=True)

    symptom: Optional[str]
    cause: Optional[str]
    solution: Optional[str]
    isComplete: bool
    missingFields: List[str]


class ReplyContract(BaseModel):
    """Top-level object the model must produce."""
    model_config = ConfigDict(strict=True)

    message: str
    extractedInfo: ExtractedInfoContract


class ModelReply(BaseModel):
    """A parsed reply: the text for the user and the extraction so far."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    extracted_info: ExtractedInfo = Field(alias="extractedInfo")


def fallback_reply(raw_text: str) -> ModelReply:
    """Reply used when the output does not honour the contract."""
    return ModelReply(message=raw_text, extracted_info=ExtractedInfo.empty())


def _is_consistent(info: ExtractedInfo, derived: ExtractedInfo) -> bool:
    return (
        info.is_complete == derived.is_complete
        and sorted(info.missing_fields) == sorted(derived.missing_fields)
    )


def parse_model_reply(raw_text: str) -> ModelReply:
    """
    Parse raw model output. Never raises.

    Args:
        raw_text: Text generated by the model

    Returns:
        ModelReply with the model's message and extraction, or the fallback
    """
    if not isinstance(raw_text, str):
        raw_text = "" if raw_text is None else str(raw_text)

    try:
        contract = ReplyContract.model_validate_json(raw_text.strip())
    except (ValidationError, ValueError) as e:
        logger.warning(
            f"Model output is not a valid reply object, passing raw text through: {str(e)[:200]}",
            extra={"extra_fields": {"raw_length": len(raw_text)}}
        )
        return fallback_reply(raw_text)

    extracted = contract.extractedInfo
    info = ExtractedInfo(
        symptom=extracted.symptom,
        cause=extracted.cause,
        solution=extracted.solution,
        is_complete=extracted.isComplete,
        missing_fields=list(extracted.missingFields),
    )

    # Flags that contradict the fields are rebuilt from the fields
    derived = ExtractedInfo.from_fields(info.symptom, info.cause, info.solution)
    if not _is_consistent(info, derived):
        logger.debug(
            f"Normalized extraction flags: isComplete {info.is_complete} -> {derived.is_complete}, "
            f"missingFields {info.missing_fields} -> {derived.missing_fields}"
        )
        info = derived

    return ModelReply(message=contract.message, extracted_info=info)
