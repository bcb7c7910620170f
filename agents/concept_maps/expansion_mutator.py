"""
Expansion Mutator

Attaches expansion details under existing nodes. The input tree is deep-copied
first and never modified; callers receive a new tree and must lay it out again.

Targets are looked up by name, depth-first and parents first. When several
nodes share a name only the first one visited is expanded. Entries whose
target does not exist are skipped.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Sequence, Union

from config.concept_map_config import DEFAULT_EXPANSION_RELATION
from models.common import NodeKind
from models.concept_tree import ConceptTree, TreeNode
from models.payloads import ExpansionDescriptor
from pydantic import ValidationError
from services.error_handler import InvalidInputError

logger = logging.getLogger(__name__)

EXPANDABLE_KINDS = (NodeKind.CONCEPT, NodeKind.SUBCONCEPT)

ExpansionInput = Union[ExpansionDescriptor, Dict[str, Any]]


def is_expandable(node: TreeNode) -> bool:
    """Only childless concepts and subconcepts may be expanded."""
    return node.is_leaf and node.kind in EXPANDABLE_KINDS


def find_expandable_nodes(tree: ConceptTree) -> List[TreeNode]:
    """Expansion candidates in pre-order."""
    return [node for node in tree.iter_nodes() if is_expandable(node)]


def _coerce_expansions(expansions: Sequence[ExpansionInput]) -> List[ExpansionDescriptor]:
    coerced = []
    for index, expansion in enumerate(expansions):
        if isinstance(expansion, ExpansionDescriptor):
            coerced.append(expansion)
            continue
        try:
            coerced.append(ExpansionDescriptor.model_validate(expansion))
        except ValidationError as e:
            raise InvalidInputError(f"Expansion {index} is malformed: {e}") from e
    return coerced


def _next_child_id(parent: TreeNode, used_ids: set) -> str:
    candidate = f"expanded-{parent.id}-{len(parent.children)}"
    suffix = 1
    unique = candidate
    while unique in used_ids:
        unique = f"{candidate}-{suffix}"
        suffix += 1
    used_ids.add(unique)
    return unique


def expand_tree(tree: ConceptTree, expansions: Sequence[ExpansionInput]) -> ConceptTree:
    """
    Return a copy of tree with expansion details appended.

    Args:
        tree: Current tree, left unchanged
        expansions: Expansion descriptors (models or plain dicts)

    Returns:
        New ConceptTree

    Raises:
        InvalidInputError: If an expansion entry is malformed
    """
    descriptors = _coerce_expansions(expansions)
    new_tree = copy.deepcopy(tree)
    used_ids = {node.id for node in new_tree.iter_nodes()}

    added = 0
    for expansion in descriptors:
        target = new_tree.find_by_name(expansion.target_name)
        if target is None:
            logger.debug(f"[ExpansionMutator] No node named '{expansion.target_name}', skipping")
            continue

        for detail in expansion.details:
            target.children.append(TreeNode(
                id=_next_child_id(target, used_ids),
                name=detail.name,
                kind=NodeKind.EXPANSION_DETAIL,
                description=detail.description,
                relation_label=DEFAULT_EXPANSION_RELATION,
                branch_color=target.branch_color,
            ))
            added += 1

    logger.debug(f"[ExpansionMutator] Added {added} nodes from {len(descriptors)} expansions")
    return new_tree
