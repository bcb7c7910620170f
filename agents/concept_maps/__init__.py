"""
Concept Maps Module for ConceptGraph

Tree building, sizing, layout and expansion for hierarchical concept maps,
plus the LLM agents that supply their content.
"""

from .concept_map_agent import ConceptMapAgent
from .expansion_agent import ExpansionAgent
from .expansion_mutator import expand_tree, find_expandable_nodes
from .layout_engine import Connector, LayoutResult, Placement, layout_tree, recommended_dimensions
from .subtree_sizer import measure_tree, subtree_height
from .tree_builder import build_tree

__all__ = [
    'ConceptMapAgent',
    'ExpansionAgent',
    'build_tree',
    'measure_tree',
    'subtree_height',
    'layout_tree',
    'recommended_dimensions',
    'Placement',
    'Connector',
    'LayoutResult',
    'expand_tree',
    'find_expandable_nodes',
]
