"""
Unit Tests for Tree Builder
===========================
"""

import pytest
from agents.concept_maps.tree_builder import ROOT_ID, branch_color, build_tree
from config.concept_map_config import (
    BRANCH_COLORS,
    DEFAULT_CONCEPT_RELATION,
    DEFAULT_DETAIL_RELATION,
    DEFAULT_SUBCONCEPT_RELATION,
    ROOT_COLOR,
)
from models.common import DepthProfile, NodeKind
from services.error_handler import InvalidInputError


class TestBuildTree:
    """Depth profiles, ids and colors."""

    def test_standard_water_cycle(self, water_cycle_branches):
        tree = build_tree("Water Cycle", DepthProfile.STANDARD, water_cycle_branches)

        assert tree.topic == "Water Cycle"
        assert tree.depth_profile == DepthProfile.STANDARD
        assert tree.node_count() == 10
        assert len(list(tree.iter_edges())) == 9
        assert tree.count_by_kind() == {
            "root": 1, "concept": 3, "subconcept": 6, "detail": 0, "expansion-detail": 0,
        }

    def test_shallow_keeps_concepts_only(self, water_cycle_branches):
        tree = build_tree("Water Cycle", "shallow", water_cycle_branches)

        assert tree.node_count() == 4
        assert all(child.is_leaf for child in tree.root.children)

    def test_deep_adds_examples(self, water_cycle_branches):
        tree = build_tree("Water Cycle", DepthProfile.DEEP, water_cycle_branches)

        counts = tree.count_by_kind()
        assert counts["detail"] == 12
        assert tree.node_count() == 22
        example = tree.find_by_id("ex-0-1-1")
        assert example.name == "Forests"
        assert example.kind == NodeKind.DETAIL
        assert example.relation_label == DEFAULT_DETAIL_RELATION

    def test_ids_follow_input_positions(self, water_cycle_branches):
        tree = build_tree("Water Cycle", DepthProfile.STANDARD, water_cycle_branches)

        ids = [node.id for node in tree.iter_nodes()]
        assert ids == [
            ROOT_ID,
            "concept-0", "sub-0-0", "sub-0-1",
            "concept-1", "sub-1-0", "sub-1-1",
            "concept-2", "sub-2-0", "sub-2-1",
        ]

    def test_same_input_same_tree(self, water_cycle_branches):
        first = build_tree("Water Cycle", DepthProfile.DEEP, water_cycle_branches)
        second = build_tree("Water Cycle", DepthProfile.DEEP, water_cycle_branches)
        assert first == second

    def test_relation_labels(self, water_cycle_branches):
        tree = build_tree("Water Cycle", DepthProfile.STANDARD, water_cycle_branches)

        assert tree.find_by_id("concept-0").relation_label == "begins with"
        assert tree.find_by_id("concept-1").relation_label == DEFAULT_CONCEPT_RELATION
        assert tree.find_by_id("sub-1-0").relation_label == DEFAULT_SUBCONCEPT_RELATION
        assert tree.root.relation_label is None

    def test_branch_colors_are_inherited(self, water_cycle_branches):
        tree = build_tree("Water Cycle", DepthProfile.DEEP, water_cycle_branches)

        assert tree.root.branch_color == ROOT_COLOR
        for i, concept in enumerate(tree.root.children):
            assert concept.branch_color == BRANCH_COLORS[i]
            for node in concept.iter_preorder():
                assert node.branch_color == concept.branch_color

    def test_palette_wraps(self):
        assert branch_color(len(BRANCH_COLORS)) == BRANCH_COLORS[0]
        assert branch_color(len(BRANCH_COLORS) + 2) == BRANCH_COLORS[2]

    def test_spanish_keys(self):
        branches = [{
            "nombre": "Fotosíntesis",
            "descripcion": "Proceso de las plantas",
            "subconceptos": [{"nombre": "Clorofila", "ejemplos": ["Hojas verdes"]}],
        }]
        tree = build_tree("Plantas", DepthProfile.DEEP, branches)

        assert tree.find_by_id("concept-0").name == "Fotosíntesis"
        assert tree.find_by_id("sub-0-0").name == "Clorofila"
        assert tree.find_by_id("ex-0-0-0").name == "Hojas verdes"

    def test_topic_is_stripped(self, water_cycle_branches):
        tree = build_tree("  Water Cycle  ", DepthProfile.SHALLOW, water_cycle_branches)
        assert tree.root.name == "Water Cycle"


class TestBuildTreeErrors:
    """Invalid input is rejected before any node is created."""

    @pytest.mark.parametrize("topic", ["", "   ", None])
    def test_blank_topic(self, topic, water_cycle_branches):
        with pytest.raises(InvalidInputError):
            build_tree(topic, DepthProfile.STANDARD, water_cycle_branches)

    def test_no_branches(self):
        with pytest.raises(InvalidInputError):
            build_tree("Water Cycle", DepthProfile.STANDARD, [])

    def test_unknown_depth_profile(self, water_cycle_branches):
        with pytest.raises(InvalidInputError):
            build_tree("Water Cycle", "extreme", water_cycle_branches)

    def test_branch_without_name(self):
        with pytest.raises(InvalidInputError):
            build_tree("Water Cycle", DepthProfile.STANDARD, [{"description": "no name"}])
