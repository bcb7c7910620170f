"""
Tree Builder

Converts the branch descriptors returned by the content-generation
collaborator into a ConceptTree.

Node ids are derived from the node's position in the input so the same input
always produces the same tree:

    root                       the topic
    concept-{i}                top-level branch i
    sub-{i}-{j}                sub-branch j of branch i
    ex-{i}-{j}-{k}             example k of sub-branch j of branch i

Each top-level branch takes the next color of the palette (index modulo the
palette length) and every node below it inherits that color.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence, Union

from config.concept_map_config import (
    BRANCH_COLORS,
    DEFAULT_CONCEPT_RELATION,
    DEFAULT_DETAIL_RELATION,
    DEFAULT_SUBCONCEPT_RELATION,
    ROOT_COLOR,
)
from models.common import DepthProfile, NodeKind
from models.concept_tree import ConceptTree, TreeNode
from models.payloads import BranchDescriptor
from pydantic import ValidationError
from services.error_handler import InvalidInputError

logger = logging.getLogger(__name__)

ROOT_ID = 'root'

BranchInput = Union[BranchDescriptor, Dict[str, Any]]


def branch_color(branch_index: int) -> str:
    return BRANCH_COLORS[branch_index % len(BRANCH_COLORS)]


def _coerce_branches(branches: Sequence[BranchInput]) -> List[BranchDescriptor]:
    coerced = []
    for index, branch in enumerate(branches):
        if isinstance(branch, BranchDescriptor):
            coerced.append(branch)
            continue
        try:
            coerced.append(BranchDescriptor.model_validate(branch))
        except ValidationError as e:
            raise InvalidInputError(f"Branch {index} is malformed: {e}") from e
    return coerced


def build_tree(
    topic: str,
    depth_profile: Union[DepthProfile, str],
    branches: Sequence[BranchInput],
) -> ConceptTree:
    """
    Build a concept tree from collaborator output.

    Args:
        topic: Central topic, becomes the root node
        depth_profile: shallow keeps only concepts, standard adds subconcepts,
            deep also adds the example items as detail nodes
        branches: Top-level branch descriptors (models or plain dicts)

    Returns:
        A new ConceptTree

    Raises:
        InvalidInputError: If the topic is blank, branches is empty or a
            branch is malformed
    """
    if not isinstance(topic, str) or not topic.strip():
        raise InvalidInputError("Topic must be a non-empty string")
    if not branches:
        raise InvalidInputError("At least one branch is required")

    try:
        depth_profile = DepthProfile(depth_profile)
    except ValueError as e:
        raise InvalidInputError(f"Unknown depth profile: {depth_profile}") from e
    descriptors = _coerce_branches(branches)

    root = TreeNode(
        id=ROOT_ID,
        name=topic.strip(),
        kind=NodeKind.ROOT,
        branch_color=ROOT_COLOR,
    )

    for i, branch in enumerate(descriptors):
        color = branch_color(i)
        concept = TreeNode(
            id=f"concept-{i}",
            name=branch.name,
            kind=NodeKind.CONCEPT,
            description=branch.description,
            relation_label=branch.relation_label or DEFAULT_CONCEPT_RELATION,
            branch_color=color,
        )

        if depth_profile != DepthProfile.SHALLOW:
            for j, sub in enumerate(branch.sub_branches):
                subconcept = TreeNode(
                    id=f"sub-{i}-{j}",
                    name=sub.name,
                    kind=NodeKind.SUBCONCEPT,
                    description=sub.description,
                    relation_label=DEFAULT_SUBCONCEPT_RELATION,
                    branch_color=color,
                )
                if depth_profile == DepthProfile.DEEP:
                    for k, example in enumerate(sub.example_items):
                        subconcept.children.append(TreeNode(
                            id=f"ex-{i}-{j}-{k}",
                            name=example,
                            kind=NodeKind.DETAIL,
                            relation_label=DEFAULT_DETAIL_RELATION,
                            branch_color=color,
                        ))
                concept.children.append(subconcept)

        root.children.append(concept)

    tree = ConceptTree(topic=root.name, depth_profile=depth_profile, root=root)
    logger.debug(
        f"[TreeBuilder] Built tree for '{tree.topic}' ({depth_profile.value}): "
        f"{len(root.children)} branches, {tree.node_count()} nodes"
    )
    return tree
