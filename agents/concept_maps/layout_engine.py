"""
Layout Engine

Places every node of a ConceptTree on a horizontal tree and emits one
connector per parent/child pair.

Two passes:

1. The subtree sizer measures every node once (bottom-up).
2. A top-down, depth-first pass centers each node on the space its subtree
   needs. A node centered on `cy` with extent `h` stacks its children from
   `cy - h/2`; each child is centered on `running_y + child_extent/2` and
   `running_y` then advances by `child_extent + SIBLING_GAP`.

The root sits at ORIGIN_X and is centered on the top-level branches, which are
stacked with a wider gap (SIBLING_GAP * BRANCH_GAP_FACTOR). Horizontal
position depends on depth only: x = ORIGIN_X + depth * LEVEL_GAP.

The layout is a pure function of the tree: structurally equal trees always
produce identical placements.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from config.concept_map_config import (
    BRANCH_GAP_FACTOR,
    CANVAS_PADDING,
    LEVEL_GAP,
    NODE_UNIT,
    NODE_WIDTH,
    ORIGIN_X,
    SIBLING_GAP,
)
from models.concept_tree import ConceptTree
from .subtree_sizer import measure_tree, stacked_extent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """Absolute position of a node's center"""
    x: float
    y: float
    depth: int


@dataclass(frozen=True)
class Connector:
    """Edge from a parent to one of its children"""
    from_id: str
    to_id: str

    @property
    def id(self) -> str:
        return f"edge-{self.from_id}-{self.to_id}"


@dataclass
class LayoutResult:
    placements: Dict[str, Placement] = field(default_factory=dict)
    connectors: List[Connector] = field(default_factory=list)
    extents: Dict[str, float] = field(default_factory=dict)
    total_height: float = 0.0


def column_x(depth: int) -> float:
    return float(ORIGIN_X + depth * LEVEL_GAP)


def layout_tree(tree: ConceptTree) -> LayoutResult:
    """
    Compute placements and connectors for every node of the tree.

    Args:
        tree: Tree to lay out; it is only read

    Returns:
        LayoutResult with placements in pre-order, connectors in pre-order
        and the extent of every subtree
    """
    extents = measure_tree(tree.root)
    result = LayoutResult(extents=extents)

    root = tree.root
    branch_gap = SIBLING_GAP * BRANCH_GAP_FACTOR
    branches_total = stacked_extent((extents[c.id] for c in root.children), branch_gap)
    root_extent = max(float(NODE_UNIT), branches_total)
    result.total_height = root_extent

    # Stack entries: (node, parent_id, center_y, depth)
    stack = [(root, None, root_extent / 2, 0)]
    while stack:
        node, parent_id, cy, depth = stack.pop()
        result.placements[node.id] = Placement(x=column_x(depth), y=cy, depth=depth)
        if parent_id is not None:
            result.connectors.append(Connector(from_id=parent_id, to_id=node.id))

        if not node.children:
            continue

        if node is root:
            gap = branch_gap
            h = root_extent
        else:
            gap = SIBLING_GAP
            h = extents[node.id]

        child_extents = [extents[child.id] for child in node.children]
        children_total = stacked_extent(child_extents, gap)
        running_y = cy - h / 2 + (h - children_total) / 2

        placed = []
        for child, child_extent in zip(node.children, child_extents):
            placed.append((child, node.id, running_y + child_extent / 2, depth + 1))
            running_y += child_extent + gap
        stack.extend(reversed(placed))

    logger.debug(
        f"[LayoutEngine] Placed {len(result.placements)} nodes, "
        f"{len(result.connectors)} connectors, height={result.total_height:.0f}"
    )
    return result


def recommended_dimensions(layout: LayoutResult) -> Dict[str, int]:
    """Canvas size hint covering every placed node plus padding."""
    if not layout.placements:
        return {"baseWidth": 0, "baseHeight": 0, "padding": CANVAS_PADDING, "width": 0, "height": 0}

    max_x = max(p.x for p in layout.placements.values())
    base_width = int(max_x + NODE_WIDTH)
    base_height = int(layout.total_height)
    return {
        "baseWidth": base_width,
        "baseHeight": base_height,
        "padding": CANVAS_PADDING,
        "width": base_width + 2 * CANVAS_PADDING,
        "height": base_height + 2 * CANVAS_PADDING,
    }
