"""
LLM client package for ConceptGraph
"""

from .llm import QwenClient, OpenAIClient

__all__ = ['QwenClient', 'OpenAIClient']
