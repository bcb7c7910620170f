"""
Subtree Sizer

Computes the vertical extent each subtree needs so that stacked siblings never
overlap:

    leaf:      NODE_UNIT
    internal:  max(NODE_UNIT, sum(child extents) + (n - 1) * SIBLING_GAP)

Children are always measured before their parent. The traversal uses an
explicit stack, so tree depth is not bounded by the interpreter's recursion
limit.
"""

from typing import Dict, Optional

from config.concept_map_config import NODE_UNIT, SIBLING_GAP
from models.concept_tree import TreeNode


def stacked_extent(child_extents, gap: float = SIBLING_GAP) -> float:
    """Total height of child extents stacked with `gap` between neighbours."""
    child_extents = list(child_extents)
    if not child_extents:
        return 0.0
    return float(sum(child_extents) + (len(child_extents) - 1) * gap)


def measure_tree(root: TreeNode, cache: Optional[Dict[str, float]] = None) -> Dict[str, float]:
    """
    Measure every subtree below (and including) root.

    Args:
        root: Subtree root
        cache: Optional dict filled in place, keyed by node id. Only valid for
            the tree it was filled from.

    Returns:
        Mapping of node id to extent
    """
    extents = {} if cache is None else cache
    if root.id in extents:
        return extents

    # Post-order: a node is finalized on its second visit, after its children
    stack = [(root, False)]
    while stack:
        node, children_done = stack.pop()
        if node.id in extents:
            continue
        if children_done or not node.children:
            if node.children:
                total = stacked_extent(extents[child.id] for child in node.children)
                extents[node.id] = max(float(NODE_UNIT), total)
            else:
                extents[node.id] = float(NODE_UNIT)
            continue
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))
    return extents


def subtree_height(node: TreeNode, cache: Optional[Dict[str, float]] = None) -> float:
    """Vertical extent required to draw node and its subtree."""
    return measure_tree(node, cache)[node.id]
