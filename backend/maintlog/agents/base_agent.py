"""
Base Agent Class - Abstract base for LLM-backed agents.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List

from ..core.exceptions import UpstreamFailure
from ..llm.base import LLMProvider, LLMMessage

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """
    Abstract base class for agents.
    An agent owns a system prompt and turns conversation history into a result
    through exactly one model call per request.
    """

    def __init__(self, name: str, system_prompt: str,
                 temperature: Optional[float] = None,
                 max_tokens: Optional[int] = None):
        """
        Initialize base agent.

        Args:
            name: Agent name
            system_prompt: System prompt for the agent
            temperature: Sampling temperature (provider default if None)
            max_tokens: Output size limit (provider default if None)
        """
        self.name = name
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._llm_provider: Optional[LLMProvider] = None

    def set_llm_provider(self, provider: LLMProvider) -> None:
        """Set the LLM provider for this agent."""
        self._llm_provider = provider

    @abstractmethod
    async def process_request(
        self,
        turns: List[LLMMessage],
        context: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Process a conversation.

        Args:
            turns: Conversation turns, oldest first, ending with the user turn
            context: Optional request-specific context

        Returns:
            Agent-specific result
        """
        pass

    async def call_llm(self, turns: List[LLMMessage]) -> str:
        """
        Call the configured LLM provider with this agent's system prompt.

        Args:
            turns: Conversation turns, oldest first

        Returns:
            Raw generated text

        Raises:
            UpstreamFailure: If no provider is configured or the call fails
        """
        if self._llm_provider is None:
            logger.error(
                f"Agent {self.name} has no LLM provider configured; set LLM_API_KEY and LLM_PROVIDER"
            )
            raise UpstreamFailure()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Agent {self.name} calling LLM: {len(turns)} turns")

        try:
            response = await self._llm_provider.chat_completion(
                turns,
                system=self.system_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(
                f"Agent {self.name} LLM call failed: {str(e)}",
                extra={"extra_fields": {"agent": self.name, "error": str(e)}}
            )
            raise UpstreamFailure() from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Agent {self.name} received LLM response: length={len(response.content)} chars"
            )
        return response.content
