"""Agents module - LLM-backed conversation agents."""

from .base_agent import BaseAgent
from .extraction_agent import RecordExtractionAgent
from .orchestrator import ConversationOrchestrator
from .response_parser import ModelReply, parse_model_reply

__all__ = [
    'BaseAgent',
    'RecordExtractionAgent',
    'ConversationOrchestrator',
    'ModelReply',
    'parse_model_reply',
]
