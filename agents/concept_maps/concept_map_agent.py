"""
Concept Map Agent

Content-generation collaborator: asks the LLM for the top-level concepts,
sub-concepts and examples of a topic, tuned to an education level, grade and
depth profile, and returns them as validated BranchDescriptor models.

The agent decides WHAT to show; the tree builder and layout engine decide
where it goes.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from config.concept_map_config import CONCEPT_MAP_MAX_TOKENS, CONCEPT_MAP_TEMPERATURE
from models.common import DepthProfile, EducationLevel
from models.payloads import BranchDescriptor
from prompts import get_depth_details, get_prompt
from services.error_handler import LLMValidationError
from ..core.base_agent import BaseAgent

logger = logging.getLogger(__name__)

# Keys under which the branch list may come back
BRANCH_LIST_KEYS = ('concepts', 'conceptos', 'branches', 'children')

EDUCATION_LEVEL_LABELS = {
    'en': {'initial': 'early childhood', 'primary': 'primary', 'secondary': 'secondary'},
    'es': {'initial': 'inicial', 'primary': 'primaria', 'secondary': 'secundaria'},
}


def education_level_label(level: Union[EducationLevel, str], language: str = 'en') -> str:
    level = level.value if isinstance(level, EducationLevel) else str(level)
    labels = EDUCATION_LEVEL_LABELS.get(language, EDUCATION_LEVEL_LABELS['en'])
    return labels.get(level, level)


def find_list(data: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[list]:
    """First list value stored under one of keys."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, list):
            return value
    return None


class ConceptMapAgent(BaseAgent):
    """Agent that generates the branch descriptors of a concept map."""

    MAX_BRANCHES: int = 8

    @property
    def diagram_type(self) -> str:
        return "concept_map"

    def build_prompt(
        self,
        topic: str,
        education_level: Union[EducationLevel, str],
        grade: Union[int, str],
        depth_profile: Union[DepthProfile, str],
        language: str = 'en',
    ) -> Tuple[str, str]:
        """Return (system_message, user_prompt) for a generation request."""
        depth = DepthProfile(depth_profile).value
        template = get_prompt(self.diagram_type, language, 'generation') or get_prompt(self.diagram_type, 'en', 'generation')
        system_message = get_prompt(self.diagram_type, language, 'system') or get_prompt(self.diagram_type, 'en', 'system')
        prompt = template.format(
            topic=topic,
            education_level=education_level_label(education_level, language),
            grade=grade,
            depth_details=get_depth_details(depth, language),
        )
        return system_message, prompt

    def validate_output(self, output: Dict[str, Any]) -> Tuple[bool, str]:
        """Validate that the answer carries a non-empty branch list."""
        is_valid, error = super().validate_output(output)
        if not is_valid:
            return is_valid, error

        branches = find_list(output, BRANCH_LIST_KEYS)
        if not branches:
            return False, "Missing or empty concepts list"
        return True, ""

    def parse_branches(self, data: Dict[str, Any]) -> List[BranchDescriptor]:
        """
        Convert the parsed JSON into branch descriptors.

        Entries that fail validation (for example a concept without a name)
        are dropped with a warning; an answer with no usable entry is an error.
        """
        raw_branches = find_list(data, BRANCH_LIST_KEYS) or []
        branches = []
        for index, raw in enumerate(raw_branches[:self.MAX_BRANCHES]):
            try:
                branches.append(BranchDescriptor.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"[ConceptMapAgent] Dropping malformed concept {index}: {e.error_count()} errors")

        if not branches:
            raise LLMValidationError("concept_map: no valid concepts in response")
        return branches

    async def generate_branches(
        self,
        topic: str,
        education_level: Union[EducationLevel, str],
        grade: Union[int, str],
        depth_profile: Union[DepthProfile, str],
        language: str = 'en',
    ) -> List[BranchDescriptor]:
        """
        Generate the top-level branches for a topic.

        Args:
            topic: Central topic
            education_level: Target education level
            grade: Grade within the level
            depth_profile: Requested level of detail
            language: Prompt language ('en' or 'es')

        Returns:
            List of BranchDescriptor

        Raises:
            LLMServiceError: If the LLM call fails or the answer is unusable
        """
        system_message, prompt = self.build_prompt(topic, education_level, grade, depth_profile, language)
        logger.debug(f"[ConceptMapAgent] Generating '{topic}' ({depth_profile}, {language}) with {self.model}")

        data = await self._request_json(
            prompt,
            system_message=system_message,
            max_tokens=CONCEPT_MAP_MAX_TOKENS,
            temperature=CONCEPT_MAP_TEMPERATURE,
        )
        branches = self.parse_branches(data)
        logger.info(f"[ConceptMapAgent] Generated {len(branches)} concepts for '{topic}'")
        return branches
