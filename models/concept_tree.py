"""
Concept Tree Model
==================

Canonical in-memory representation of a concept map: a single root node
owning an ordered hierarchy of concept, subconcept and detail nodes.

The model carries no layout information. Positions are always derived from
the tree by the layout engine, and trees are replaced rather than patched.

Author: ConceptGraph Team
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .common import DepthProfile, NodeKind


@dataclass
class TreeNode:
    """A single concept map entry"""
    id: str
    name: str
    kind: NodeKind
    description: Optional[str] = None
    relation_label: Optional[str] = None
    children: List['TreeNode'] = field(default_factory=list)
    branch_color: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_preorder(self) -> Iterator['TreeNode']:
        """Yield this node and its descendants depth-first, parents first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class ConceptTree:
    """The aggregate: topic, depth profile and root node"""
    topic: str
    depth_profile: DepthProfile
    root: TreeNode

    def iter_nodes(self) -> Iterator[TreeNode]:
        return self.root.iter_preorder()

    def iter_edges(self) -> Iterator[Tuple[TreeNode, TreeNode]]:
        """Yield (parent, child) pairs in pre-order."""
        for node in self.iter_nodes():
            for child in node.children:
                yield node, child

    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def find_by_id(self, node_id: str) -> Optional[TreeNode]:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def find_by_name(self, name: str) -> Optional[TreeNode]:
        """
        First node in pre-order whose name matches exactly.

        Names are not unique; when two branches share a name only the first
        visited node is returned.
        """
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None

    def depths(self) -> Dict[str, int]:
        """Map every node id to its distance from the root."""
        result = {}
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            result[node.id] = depth
            for child in node.children:
                stack.append((child, depth + 1))
        return result

    def count_by_kind(self) -> Dict[str, int]:
        counts = {kind.value: 0 for kind in NodeKind}
        for node in self.iter_nodes():
            counts[node.kind.value] += 1
        return counts
