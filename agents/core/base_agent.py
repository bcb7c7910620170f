"""
Base Agent Class for ConceptGraph

This module provides the abstract base class that the concept map
collaborator agents inherit from, ensuring consistent interface and behavior.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple
import logging

from config.settings import config
from services.error_handler import LLMValidationError
from .agent_utils import extract_json_from_response

logger = logging.getLogger(__name__)

class BaseAgent(ABC):
    """
    Abstract base class for all ConceptGraph agents.

    Subclasses build a prompt, call the LLM service and turn the JSON answer
    into validated payload models.
    """

    def __init__(self, model: Optional[str] = None, llm=None):
        """
        Initialize the base agent.

        Args:
            model (str): LLM client to use ('qwen', 'openai'). Defaults to DEFAULT_LLM.
            llm: Object exposing an async chat(...) method. Defaults to the
                shared llm_service.
        """
        self.model = model or config.DEFAULT_LLM
        if llm is None:
            from services.llm_service import llm_service
            llm = llm_service
        self.llm = llm

    @property
    @abstractmethod
    def diagram_type(self) -> str:
        """Prompt registry key prefix for this agent."""

    async def _request_json(
        self,
        prompt: str,
        system_message: str,
        max_tokens: int,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Call the LLM and parse its answer as a JSON object.

        Raises:
            LLMValidationError: If no JSON object can be extracted
        """
        response = await self.llm.chat(
            prompt=prompt,
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            system_message=system_message,
        )

        data = extract_json_from_response(response)
        if not isinstance(data, dict):
            logger.warning(f"[{self.__class__.__name__}] No JSON object in response ({len(response or '')} chars)")
            raise LLMValidationError(f"{self.diagram_type}: response is not a JSON object")

        is_valid, error = self.validate_output(data)
        if not is_valid:
            raise LLMValidationError(f"{self.diagram_type}: {error}")
        return data

    def validate_output(self, output: Dict[str, Any]) -> Tuple[bool, str]:
        """
        Validate the parsed output.

        Args:
            output: Parsed JSON object

        Returns:
            tuple: (is_valid, error_message)
        """
        if not output:
            return False, "Empty output"

        if isinstance(output, dict) and output.get('error'):
            return False, output.get('error', 'Unknown error')

        return True, ""
