"""
Concept Map Session
===================

Per-session orchestration of the generate and expand cycles:

    generate: collaborator -> build_tree -> layout_tree -> render spec
    expand:   candidates -> collaborator -> expand_tree -> layout_tree -> render spec

The tree is the single source of truth. Every successful cycle replaces the
tree and recomputes the whole layout; a failed cycle leaves the previous tree,
layout and counters untouched. Collaborator calls are never retried.

Each session carries an in-flight flag: a second generate or expand while a
call is outstanding returns status `busy` without doing anything, and an
expand after the budget is spent returns `budget_exhausted` without calling
the collaborator.

Sessions live in memory only, in the SessionManager registry.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Tuple

from agents import get_agent
from agents.concept_maps.expansion_mutator import expand_tree, find_expandable_nodes
from agents.concept_maps.layout_engine import LayoutResult, layout_tree, recommended_dimensions
from agents.concept_maps.tree_builder import build_tree
from config.settings import config
from models.common import DepthProfile, EducationLevel
from models.concept_tree import ConceptTree
from models.messages import Messages
from services.error_handler import (
    CollaboratorError,
    InvalidInputError,
    LLMAccessDeniedError,
    LLMContentFilterError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMValidationError,
    NoExpandableNodesError,
)

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Outcome of one generate/expand request"""
    OK = "ok"
    BUSY = "busy"
    BUDGET_EXHAUSTED = "budget_exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationConfig:
    """Everything the collaborators need to write content for a topic"""
    topic: str
    education_level: EducationLevel = EducationLevel.PRIMARY
    grade: int = 3
    depth_profile: DepthProfile = DepthProfile.STANDARD
    language: str = 'en'
    llm: Optional[str] = None


@dataclass
class CycleResult:
    status: SessionStatus
    message: Optional[str] = None
    added: int = 0

    @property
    def success(self) -> bool:
        return self.status == SessionStatus.OK


def collaborator_error_message(error: CollaboratorError, action: str, language: str) -> str:
    """Localized user message for a failed collaborator call."""
    if isinstance(error, LLMTimeoutError):
        return Messages.error("llm_timeout", language)
    if isinstance(error, LLMRateLimitError):
        return Messages.error("llm_rate_limited", language)
    if isinstance(error, LLMAccessDeniedError):
        return Messages.error("llm_access_denied", language)
    if isinstance(error, LLMContentFilterError):
        return Messages.error("llm_content_filter", language)
    if isinstance(error, LLMValidationError):
        return Messages.error("llm_invalid_response", language)
    key = "expansion_failed" if action == "expand" else "generation_failed"
    return Messages.error(key, language, str(error))


def build_render_spec(
    tree: Optional[ConceptTree],
    layout: Optional[LayoutResult],
    overrides: Optional[Dict[str, Tuple[float, float]]] = None,
) -> Dict[str, Any]:
    """
    Convert a laid-out tree into the payload consumed by the rendering client.

    Positions are node centers. Visual-only overrides replace the computed
    position of the nodes they name.
    """
    if tree is None or layout is None:
        return {
            "nodes": [],
            "edges": [],
            "stats": {},
            "recommended_dimensions": recommended_dimensions(LayoutResult()),
        }

    overrides = overrides or {}
    nodes = []
    for node in tree.iter_nodes():
        placement = layout.placements[node.id]
        x, y = overrides.get(node.id, (placement.x, placement.y))
        data = {"label": node.name, "kind": node.kind.value}
        if node.description:
            data["description"] = node.description
        if node.branch_color:
            data["color"] = node.branch_color
        nodes.append({
            "id": node.id,
            "position": {"x": x, "y": y},
            "data": data,
        })

    edges = []
    for parent, child in tree.iter_edges():
        edge = {
            "id": f"edge-{parent.id}-{child.id}",
            "source": parent.id,
            "target": child.id,
        }
        if child.relation_label:
            edge["label"] = child.relation_label
        edges.append(edge)

    stats = tree.count_by_kind()
    stats["total"] = len(nodes)

    return {
        "nodes": nodes,
        "edges": edges,
        "stats": stats,
        "recommended_dimensions": recommended_dimensions(layout),
    }


class ConceptMapSession:
    """
    One user's concept map: current tree, layout, overrides and counters.

    Collaborators are created per request through the factories so each
    request can pick its LLM client.
    """

    def __init__(
        self,
        session_id: str,
        generator_factory: Callable[[Optional[str]], Any] = None,
        expander_factory: Callable[[Optional[str]], Any] = None,
        max_expansions: Optional[int] = None,
        max_targets: Optional[int] = None,
    ):
        self.session_id = session_id
        self.generator_factory = generator_factory or (lambda model: get_agent('concept_map', model))
        self.expander_factory = expander_factory or (lambda model: get_agent('concept_map_expansion', model))
        self.max_expansions = config.MAX_EXPANSIONS if max_expansions is None else max_expansions
        self.max_targets = config.MAX_EXPANSION_TARGETS if max_targets is None else max_targets

        self.config: Optional[GenerationConfig] = None
        self.last_request: Optional[GenerationConfig] = None
        self.tree: Optional[ConceptTree] = None
        self.layout: Optional[LayoutResult] = None
        self.overrides: Dict[str, Tuple[float, float]] = {}
        self.expansion_count = 0
        self.in_flight = False
        self.last_error: Optional[str] = None
        # Bumped by clear() so that a call still in flight is discarded
        self._epoch = 0

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def expansions_remaining(self) -> int:
        return max(0, self.max_expansions - self.expansion_count)

    @property
    def language(self) -> str:
        if self.last_request is not None:
            return self.last_request.language
        return config.DEFAULT_LANGUAGE

    def can_expand(self) -> bool:
        return (
            self.tree is not None
            and not self.in_flight
            and self.expansion_count < self.max_expansions
            and bool(find_expandable_nodes(self.tree))
        )

    def render(self) -> Dict[str, Any]:
        """Render spec for the current tree plus session counters."""
        spec = build_render_spec(self.tree, self.layout, self.overrides)
        spec.update({
            "session_id": self.session_id,
            "topic": self.tree.topic if self.tree else None,
            "depth_profile": self.tree.depth_profile.value if self.tree else None,
            "expansion_count": self.expansion_count,
            "expansions_remaining": self.expansions_remaining,
            "can_expand": self.can_expand(),
        })
        return spec

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    def _apply(self, tree: ConceptTree) -> None:
        """Replace the tree and recompute the full layout."""
        self.layout = layout_tree(tree)
        self.tree = tree
        self.overrides = {}
        self.last_error = None

    def _fail(self, error: CollaboratorError, action: str, language: str) -> CycleResult:
        message = collaborator_error_message(error, action, language)
        self.last_error = message
        logger.warning(f"[ConceptMapSession] {self.session_id} {action} failed: {error}")
        return CycleResult(SessionStatus.FAILED, message)

    def _discarded(self, language: str) -> CycleResult:
        logger.info(f"[ConceptMapSession] {self.session_id} result discarded after clear")
        return CycleResult(SessionStatus.FAILED, Messages.warning("request_discarded", language))

    async def generate(self, request: GenerationConfig) -> CycleResult:
        """
        Build a new concept map from scratch.

        On success the expansion counter resets and drag overrides are dropped.

        Raises:
            InvalidInputError: If the collaborator output cannot form a tree
        """
        language = request.language
        if self.in_flight:
            return CycleResult(SessionStatus.BUSY, Messages.warning("request_in_progress", language))

        self.last_request = request
        self.in_flight = True
        epoch = self._epoch
        try:
            generator = self.generator_factory(request.llm)
            try:
                branches = await generator.generate_branches(
                    request.topic,
                    request.education_level,
                    request.grade,
                    request.depth_profile,
                    language,
                )
            except CollaboratorError as e:
                if epoch != self._epoch:
                    return self._discarded(language)
                return self._fail(e, "generate", language)

            if epoch != self._epoch:
                return self._discarded(language)

            tree = build_tree(request.topic, request.depth_profile, branches)
            self._apply(tree)
            self.config = request
            self.expansion_count = 0
        finally:
            if epoch == self._epoch:
                self.in_flight = False

        count = self.tree.node_count()
        logger.info(f"[ConceptMapSession] {self.session_id} generated '{self.tree.topic}' with {count} nodes")
        return CycleResult(SessionStatus.OK, Messages.success("concept_map_generated", language, count), added=count)

    async def regenerate(self) -> CycleResult:
        """Run generate again with the last requested configuration."""
        if self.last_request is None:
            raise InvalidInputError(Messages.error("no_concept_map", self.language))
        return await self.generate(self.last_request)

    def select_targets(self) -> List[str]:
        """
        Names of the nodes to expand next: childless concepts and subconcepts
        in pre-order, at most max_targets, duplicate names collapsed.
        """
        names = []
        for node in find_expandable_nodes(self.tree):
            if node.name not in names:
                names.append(node.name)
            if len(names) >= self.max_targets:
                break
        return names

    async def expand(self) -> CycleResult:
        """
        Add deeper detail under up to max_targets leaf concepts.

        Raises:
            InvalidInputError: If no concept map has been generated
            NoExpandableNodesError: If no eligible leaf remains
        """
        language = self.language
        if self.tree is None or self.config is None:
            raise InvalidInputError(Messages.error("no_concept_map", language))
        if self.in_flight:
            return CycleResult(SessionStatus.BUSY, Messages.warning("request_in_progress", language))
        if self.expansion_count >= self.max_expansions:
            return CycleResult(
                SessionStatus.BUDGET_EXHAUSTED,
                Messages.warning("expansion_budget_exhausted", language, self.expansion_count, self.max_expansions)
            )

        targets = self.select_targets()
        if not targets:
            raise NoExpandableNodesError(Messages.error("no_expandable_nodes", language))

        current = self.config
        self.in_flight = True
        epoch = self._epoch
        try:
            expander = self.expander_factory(current.llm)
            try:
                expansions = await expander.generate_expansions(
                    current.topic,
                    current.education_level,
                    current.grade,
                    targets,
                    language,
                )
            except CollaboratorError as e:
                if epoch != self._epoch:
                    return self._discarded(language)
                return self._fail(e, "expand", language)

            if epoch != self._epoch:
                return self._discarded(language)

            before = self.tree.node_count()
            new_tree = expand_tree(self.tree, expansions)
            self._apply(new_tree)
            self.expansion_count += 1
        finally:
            if epoch == self._epoch:
                self.in_flight = False

        added = self.tree.node_count() - before
        logger.info(
            f"[ConceptMapSession] {self.session_id} expansion {self.expansion_count}/{self.max_expansions} "
            f"added {added} nodes under {len(targets)} targets"
        )
        return CycleResult(SessionStatus.OK, Messages.success("concept_map_expanded", language, added), added=added)

    # ------------------------------------------------------------------
    # Visual-only edits
    # ------------------------------------------------------------------

    def move_node(self, node_id: str, x: float, y: float) -> None:
        """
        Record a drag position for one node.

        The canonical tree and layout are untouched; the override is dropped
        by the next generate or expand.

        Raises:
            InvalidInputError: If no concept map has been generated
            KeyError: If the node does not exist
        """
        if self.tree is None:
            raise InvalidInputError(Messages.error("no_concept_map", self.language))
        if node_id not in self.layout.placements:
            raise KeyError(node_id)
        self.overrides[node_id] = (float(x), float(y))
        logger.debug(f"[ConceptMapSession] {self.session_id} moved {node_id} to ({x}, {y})")

    def clear(self) -> None:
        """Discard tree, layout, overrides, configuration and counters."""
        self._epoch += 1
        self.config = None
        self.last_request = None
        self.tree = None
        self.layout = None
        self.overrides = {}
        self.expansion_count = 0
        self.in_flight = False
        self.last_error = None
        logger.debug(f"[ConceptMapSession] {self.session_id} cleared")


class SessionManager:
    """
    Thread-safe in-memory registry of concept map sessions.
    """

    def __init__(
        self,
        generator_factory: Callable[[Optional[str]], Any] = None,
        expander_factory: Callable[[Optional[str]], Any] = None,
    ):
        self._sessions: Dict[str, ConceptMapSession] = {}
        self._lock = Lock()
        self.generator_factory = generator_factory
        self.expander_factory = expander_factory
        logger.debug("[SessionManager] Initialized")

    def create(self) -> ConceptMapSession:
        session_id = uuid.uuid4().hex
        session = ConceptMapSession(
            session_id,
            generator_factory=self.generator_factory,
            expander_factory=self.expander_factory,
        )
        with self._lock:
            self._sessions[session_id] = session
        logger.debug(f"[SessionManager] Created session {session_id}")
        return session

    def get(self, session_id: str) -> ConceptMapSession:
        """
        Raises:
            KeyError: If the session does not exist
        """
        with self._lock:
            return self._sessions[session_id]

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug(f"[SessionManager] Removed session {session_id}")
        return removed

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def cleanup(self) -> None:
        with self._lock:
            self._sessions.clear()


# Singleton instance
session_manager = SessionManager()
