"""
ConceptGraph Agents Package

Central registry for the concept map collaborator agents.
"""

from .concept_maps import ConceptMapAgent, ExpansionAgent

# Agent Registry - Maps collaborator roles to their agent classes
AGENT_REGISTRY = {
    'concept_map': ConceptMapAgent,
    'concept_map_expansion': ExpansionAgent,
}

def get_agent(agent_type: str, model: str = None):
    """
    Get an agent instance for the specified role.

    Args:
        agent_type: Registry key ('concept_map', 'concept_map_expansion')
        model: LLM client name, None uses DEFAULT_LLM

    Returns:
        Agent instance or None if not found
    """
    agent_class = AGENT_REGISTRY.get(agent_type)
    if agent_class:
        return agent_class(model=model)
    return None

__all__ = [
    'ConceptMapAgent',
    'ExpansionAgent',
    'AGENT_REGISTRY',
    'get_agent',
]
