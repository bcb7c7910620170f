"""
Expansion Agent

Expansion collaborator: asks the LLM for 2-3 deeper details under each of a
few existing concept names and returns them as ExpansionDescriptor models.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple, Union

from pydantic import ValidationError

from config.concept_map_config import CONCEPT_MAP_TEMPERATURE, EXPANSION_MAX_TOKENS
from config.settings import config
from models.common import EducationLevel
from models.payloads import ExpansionDescriptor
from prompts import get_prompt
from services.error_handler import InvalidInputError, LLMValidationError
from ..core.base_agent import BaseAgent
from .concept_map_agent import education_level_label, find_list

logger = logging.getLogger(__name__)

EXPANSION_LIST_KEYS = ('expansions', 'expansiones')


class ExpansionAgent(BaseAgent):
    """Agent that generates expansion details for existing nodes."""

    @property
    def diagram_type(self) -> str:
        return "concept_map"

    def build_prompt(
        self,
        topic: str,
        education_level: Union[EducationLevel, str],
        grade: Union[int, str],
        target_names: Sequence[str],
        language: str = 'en',
    ) -> Tuple[str, str]:
        """Return (system_message, user_prompt) for an expansion request."""
        template = get_prompt(self.diagram_type, language, 'expansion') or get_prompt(self.diagram_type, 'en', 'expansion')
        system_message = (get_prompt(self.diagram_type, language, 'expansion_system')
                          or get_prompt(self.diagram_type, 'en', 'expansion_system'))
        target_list = "\n".join(f"{i + 1}. {name}" for i, name in enumerate(target_names))
        prompt = template.format(
            topic=topic,
            education_level=education_level_label(education_level, language),
            grade=grade,
            target_list=target_list,
        )
        return system_message, prompt

    def validate_output(self, output: Dict[str, Any]) -> Tuple[bool, str]:
        is_valid, error = super().validate_output(output)
        if not is_valid:
            return is_valid, error
        if find_list(output, EXPANSION_LIST_KEYS) is None:
            return False, "Missing expansions list"
        return True, ""

    def parse_expansions(self, data: Dict[str, Any], target_names: Sequence[str]) -> List[ExpansionDescriptor]:
        """
        Convert the parsed JSON into expansion descriptors.

        Entries naming a node that was not requested are kept: the mutator
        skips names it cannot find. Malformed entries are dropped.
        """
        expansions = []
        for index, raw in enumerate(find_list(data, EXPANSION_LIST_KEYS) or []):
            try:
                expansion = ExpansionDescriptor.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"[ExpansionAgent] Dropping malformed expansion {index}: {e.error_count()} errors")
                continue
            if expansion.target_name not in target_names:
                logger.debug(f"[ExpansionAgent] Unrequested target '{expansion.target_name}'")
            expansions.append(expansion)

        if not expansions:
            raise LLMValidationError("concept_map: no valid expansions in response")
        return expansions

    async def generate_expansions(
        self,
        topic: str,
        education_level: Union[EducationLevel, str],
        grade: Union[int, str],
        target_names: Sequence[str],
        language: str = 'en',
    ) -> List[ExpansionDescriptor]:
        """
        Generate expansion details for the given node names.

        Args:
            topic: Central topic of the map
            education_level: Target education level
            grade: Grade within the level
            target_names: Names of the nodes to expand (at most MAX_EXPANSION_TARGETS)
            language: Prompt language ('en' or 'es')

        Returns:
            List of ExpansionDescriptor

        Raises:
            InvalidInputError: If no target or too many targets are given
            LLMServiceError: If the LLM call fails or the answer is unusable
        """
        target_names = list(target_names)
        if not target_names:
            raise InvalidInputError("At least one expansion target is required")
        if len(target_names) > config.MAX_EXPANSION_TARGETS:
            raise InvalidInputError(
                f"At most {config.MAX_EXPANSION_TARGETS} expansion targets are allowed, got {len(target_names)}"
            )

        system_message, prompt = self.build_prompt(topic, education_level, grade, target_names, language)
        logger.debug(f"[ExpansionAgent] Expanding {len(target_names)} nodes of '{topic}' with {self.model}")

        data = await self._request_json(
            prompt,
            system_message=system_message,
            max_tokens=EXPANSION_MAX_TOKENS,
            temperature=CONCEPT_MAP_TEMPERATURE,
        )
        expansions = self.parse_expansions(data, target_names)
        logger.info(f"[ExpansionAgent] Received {len(expansions)} expansions for '{topic}'")
        return expansions
