"""
Core agent functionality for ConceptGraph

This module contains the base agent class and common utilities
used by the concept map agents.
"""

from .base_agent import BaseAgent
from .agent_utils import extract_json_from_response, detect_language

__all__ = ['BaseAgent', 'extract_json_from_response', 'detect_language']
