"""
Centralized Prompt Registry for ConceptGraph

This module provides a unified interface for all prompts, organized by
diagram type, prompt type and language.
"""

from .concept_maps import CONCEPT_MAP_PROMPTS, CONCEPT_MAP_DEPTH_DETAILS


# Unified prompt registry
PROMPT_REGISTRY = {
    **CONCEPT_MAP_PROMPTS,
}

def get_prompt(diagram_type: str, language: str = 'en', prompt_type: str = 'generation') -> str:
    """
    Get a prompt for a specific diagram type and language.

    Args:
        diagram_type: Type of diagram (e.g., 'concept_map')
        language: Language code ('en' or 'es')
        prompt_type: Type of prompt ('generation', 'system', 'expansion', 'expansion_system')

    Returns:
        str: The prompt template, or "" if none is registered
    """
    key = f"{diagram_type}_{prompt_type}_{language}"
    return PROMPT_REGISTRY.get(key, "")

def get_depth_details(depth_profile: str, language: str = 'en') -> str:
    """Detail instruction for a depth profile, falling back to English."""
    details = CONCEPT_MAP_DEPTH_DETAILS.get(language, CONCEPT_MAP_DEPTH_DETAILS['en'])
    return details.get(depth_profile, "")
