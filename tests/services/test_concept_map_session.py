"""
Unit Tests for Concept Map Sessions
===================================

Generate/expand cycles driven by in-memory collaborators.
"""

import asyncio

import pytest
from agents.concept_maps.concept_map_agent import ConceptMapAgent
from models.common import DepthProfile, EducationLevel
from models.messages import Messages
from services.concept_map_session import (
    ConceptMapSession,
    GenerationConfig,
    SessionManager,
    SessionStatus,
    build_render_spec,
)
from services.client_manager import ClientManager
from services.llm_service import LLMService
from services.error_handler import (
    InvalidInputError,
    LLMContentFilterError,
    LLMProviderError,
    LLMTimeoutError,
    NoExpandableNodesError,
)

WATER_CYCLE = GenerationConfig(
    topic="Water Cycle",
    education_level=EducationLevel.PRIMARY,
    grade=4,
    depth_profile=DepthProfile.STANDARD,
    language='en',
    llm='qwen',
)


def _session(generator, expander=None, **kwargs):
    return ConceptMapSession(
        "test-session",
        generator_factory=lambda model: generator,
        expander_factory=lambda model: expander,
        **kwargs
    )


class TestGenerate:
    """Generate cycle."""

    @pytest.mark.asyncio
    async def test_generate_water_cycle(self, fake_generator):
        session = _session(fake_generator)

        result = await session.generate(WATER_CYCLE)

        assert result.status == SessionStatus.OK
        assert result.success
        assert result.message == Messages.success("concept_map_generated", 'en', 10)
        assert session.tree.node_count() == 10
        assert len(session.layout.connectors) == 9
        assert session.config == WATER_CYCLE
        assert session.expansion_count == 0
        assert not session.in_flight
        assert fake_generator.calls[0]["grade"] == 4
        assert fake_generator.calls[0]["language"] == 'en'

    @pytest.mark.asyncio
    async def test_factory_receives_llm(self, fake_generator):
        models = []

        def factory(model):
            models.append(model)
            return fake_generator

        session = ConceptMapSession("s", generator_factory=factory)
        await session.generate(WATER_CYCLE)

        assert models == ['qwen']

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_map(self, make_generator):
        generator = make_generator()
        session = _session(generator)
        await session.generate(WATER_CYCLE)
        previous_tree = session.tree
        previous_layout = session.layout

        generator.error = LLMTimeoutError("timed out")
        result = await session.generate(GenerationConfig(topic="Volcanoes"))

        assert result.status == SessionStatus.FAILED
        assert not result.success
        assert result.message == Messages.error("llm_timeout", 'en')
        assert session.tree is previous_tree
        assert session.layout is previous_layout
        assert session.config == WATER_CYCLE
        assert session.last_error == result.message
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_failure_messages_are_localized(self, make_generator):
        session = _session(make_generator(error=LLMContentFilterError("blocked")))

        result = await session.generate(GenerationConfig(topic="Ciclo del agua", language='es'))

        assert result.message == Messages.error("llm_content_filter", 'es')

    @pytest.mark.asyncio
    async def test_provider_failure_message(self, make_generator):
        session = _session(make_generator(error=LLMProviderError("HTTP 500", provider='qwen')))

        result = await session.generate(WATER_CYCLE)

        assert result.status == SessionStatus.FAILED
        assert result.message == Messages.error("generation_failed", 'en', "HTTP 500")

    @pytest.mark.asyncio
    async def test_unknown_model_fails_cleanly(self):
        service = LLMService()
        service.client_manager = ClientManager()
        service.client_manager.register_client('qwen', object())
        session = ConceptMapSession(
            "s", generator_factory=lambda model: ConceptMapAgent(model, llm=service)
        )

        result = await session.generate(GenerationConfig(topic="Water Cycle", llm='deepseek'))

        assert result.status == SessionStatus.FAILED
        assert "Unsupported model: deepseek" in result.message
        assert session.tree is None
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_empty_branches_raise(self, make_generator):
        session = _session(make_generator(branches=[]))

        with pytest.raises(InvalidInputError):
            await session.generate(WATER_CYCLE)
        assert session.tree is None
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_busy_while_in_flight(self, make_generator, gate):
        generator = make_generator(gate=gate)
        session = _session(generator)

        first = asyncio.create_task(session.generate(WATER_CYCLE))
        await asyncio.sleep(0)
        assert session.in_flight

        second = await session.generate(WATER_CYCLE)
        assert second.status == SessionStatus.BUSY
        assert second.message == Messages.warning("request_in_progress", 'en')

        gate.set()
        result = await first
        assert result.status == SessionStatus.OK
        assert len(generator.calls) == 1

    @pytest.mark.asyncio
    async def test_generate_resets_expansions_and_overrides(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)
        await session.generate(WATER_CYCLE)
        await session.expand()
        session.move_node("root", 10, 20)

        await session.generate(WATER_CYCLE)

        assert session.expansion_count == 0
        assert session.overrides == {}
        assert session.tree.node_count() == 10

    @pytest.mark.asyncio
    async def test_regenerate_uses_last_request(self, make_generator):
        generator = make_generator(error=LLMTimeoutError("slow"))
        session = _session(generator)
        await session.generate(WATER_CYCLE)
        assert session.config is None

        generator.error = None
        result = await session.regenerate()

        assert result.status == SessionStatus.OK
        assert session.config == WATER_CYCLE
        assert len(generator.calls) == 2

    @pytest.mark.asyncio
    async def test_regenerate_without_request(self, fake_generator):
        session = _session(fake_generator)

        with pytest.raises(InvalidInputError):
            await session.regenerate()


class TestExpand:
    """Expand cycle."""

    @pytest.mark.asyncio
    async def test_expand_first_leaves(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)
        await session.generate(WATER_CYCLE)

        result = await session.expand()

        assert result.status == SessionStatus.OK
        assert result.added == 8
        assert result.message == Messages.success("concept_map_expanded", 'en', 8)
        assert fake_expander.calls[0]["target_names"] == ["Solar heat", "Transpiration", "Clouds", "Dew"]
        assert session.expansion_count == 1
        assert session.tree.node_count() == 18
        assert len(session.layout.placements) == 18
        assert session.tree.find_by_id("expanded-sub-0-0-0").name == "Solar heat detail 1"

    @pytest.mark.asyncio
    async def test_expand_passes_configuration(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)
        await session.generate(GenerationConfig(topic="Ciclo del agua", language='es'))

        await session.expand()

        assert fake_expander.calls[0]["topic"] == "Ciclo del agua"
        assert fake_expander.calls[0]["language"] == 'es'

    @pytest.mark.asyncio
    async def test_targets_are_limited(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander, max_targets=2)
        await session.generate(WATER_CYCLE)

        assert session.select_targets() == ["Solar heat", "Transpiration"]

    @pytest.mark.asyncio
    async def test_duplicate_names_are_collapsed(self, make_generator, fake_expander):
        branches = [
            {"name": "Summer", "sub_branches": [{"name": "Examples"}, {"name": "Heat"}]},
            {"name": "Winter", "sub_branches": [{"name": "Examples"}, {"name": "Cold"}]},
        ]
        session = _session(make_generator(branches=branches), fake_expander)
        await session.generate(GenerationConfig(topic="Seasons"))

        assert session.select_targets() == ["Examples", "Heat", "Cold"]

    @pytest.mark.asyncio
    async def test_budget_exhausted(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander, max_expansions=1)
        await session.generate(WATER_CYCLE)
        await session.expand()
        tree = session.tree

        result = await session.expand()

        assert result.status == SessionStatus.BUDGET_EXHAUSTED
        assert result.message == Messages.warning("expansion_budget_exhausted", 'en', 1, 1)
        assert len(fake_expander.calls) == 1
        assert session.tree is tree
        assert session.expansions_remaining == 0
        assert not session.can_expand()

    @pytest.mark.asyncio
    async def test_expand_without_map(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)

        with pytest.raises(InvalidInputError):
            await session.expand()

    @pytest.mark.asyncio
    async def test_no_expandable_nodes(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)
        await session.generate(GenerationConfig(topic="Water Cycle", depth_profile=DepthProfile.DEEP))

        assert not session.can_expand()
        with pytest.raises(NoExpandableNodesError):
            await session.expand()
        assert fake_expander.calls == []

    @pytest.mark.asyncio
    async def test_failure_keeps_tree_and_counter(self, fake_generator, make_expander):
        session = _session(fake_generator, make_expander(error=LLMTimeoutError("slow")))
        await session.generate(WATER_CYCLE)
        tree = session.tree

        result = await session.expand()

        assert result.status == SessionStatus.FAILED
        assert session.tree is tree
        assert session.expansion_count == 0
        assert session.can_expand()

    @pytest.mark.asyncio
    async def test_busy_while_expanding(self, fake_generator, make_expander, gate):
        expander = make_expander(gate=gate)
        session = _session(fake_generator, expander)
        await session.generate(WATER_CYCLE)

        first = asyncio.create_task(session.expand())
        await asyncio.sleep(0)

        assert (await session.expand()).status == SessionStatus.BUSY
        assert (await session.generate(WATER_CYCLE)).status == SessionStatus.BUSY

        gate.set()
        assert (await first).status == SessionStatus.OK
        assert session.expansion_count == 1


class TestVisualEdits:
    """Drag overrides and clear."""

    @pytest.mark.asyncio
    async def test_move_node_only_changes_render(self, fake_generator):
        session = _session(fake_generator)
        await session.generate(WATER_CYCLE)
        placement = session.layout.placements["concept-1"]

        session.move_node("concept-1", 900, 40)

        nodes = {n["id"]: n for n in session.render()["nodes"]}
        assert nodes["concept-1"]["position"] == {"x": 900.0, "y": 40.0}
        assert session.layout.placements["concept-1"] == placement

    @pytest.mark.asyncio
    async def test_move_unknown_node(self, fake_generator):
        session = _session(fake_generator)
        await session.generate(WATER_CYCLE)

        with pytest.raises(KeyError):
            session.move_node("concept-99", 0, 0)

    def test_move_without_map(self, fake_generator):
        with pytest.raises(InvalidInputError):
            _session(fake_generator).move_node("root", 0, 0)

    @pytest.mark.asyncio
    async def test_expand_drops_overrides(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)
        await session.generate(WATER_CYCLE)
        session.move_node("root", 1, 1)

        await session.expand()

        assert session.overrides == {}

    @pytest.mark.asyncio
    async def test_clear(self, fake_generator, fake_expander):
        session = _session(fake_generator, fake_expander)
        await session.generate(WATER_CYCLE)
        await session.expand()

        session.clear()

        assert session.tree is None
        assert session.layout is None
        assert session.config is None
        assert session.last_request is None
        assert session.expansion_count == 0
        spec = session.render()
        assert spec["nodes"] == []
        assert spec["edges"] == []
        assert spec["topic"] is None
        assert spec["can_expand"] is False

    @pytest.mark.asyncio
    async def test_clear_discards_in_flight_result(self, make_generator, gate):
        session = _session(make_generator(gate=gate))

        pending = asyncio.create_task(session.generate(WATER_CYCLE))
        await asyncio.sleep(0)
        session.clear()
        gate.set()
        result = await pending

        assert result.status == SessionStatus.FAILED
        assert result.message == Messages.warning("request_discarded", 'en')
        assert session.tree is None
        assert not session.in_flight


class TestRenderSpec:
    """Payload handed to the rendering client."""

    @pytest.mark.asyncio
    async def test_render(self, fake_generator):
        session = _session(fake_generator)
        await session.generate(WATER_CYCLE)

        spec = session.render()

        assert spec["session_id"] == "test-session"
        assert spec["topic"] == "Water Cycle"
        assert spec["depth_profile"] == "standard"
        assert spec["expansions_remaining"] == session.max_expansions
        assert spec["can_expand"] is True
        assert len(spec["nodes"]) == 10
        assert len(spec["edges"]) == 9
        assert spec["stats"]["total"] == 10
        assert spec["stats"]["subconcept"] == 6

        root = spec["nodes"][0]
        placement = session.layout.placements["root"]
        assert root["id"] == "root"
        assert root["position"] == {"x": placement.x, "y": placement.y}
        assert root["data"]["kind"] == "root"
        assert root["data"]["label"] == "Water Cycle"

        first_edge = spec["edges"][0]
        assert first_edge == {
            "id": "edge-root-concept-0",
            "source": "root",
            "target": "concept-0",
            "label": "begins with",
        }

    def test_empty_render_spec(self):
        spec = build_render_spec(None, None)
        assert spec["nodes"] == []
        assert spec["recommended_dimensions"]["width"] == 0


class TestSessionManager:
    """In-memory session registry."""

    def test_create_get_remove(self, fake_generator):
        manager = SessionManager(generator_factory=lambda model: fake_generator)
        session = manager.create()

        assert manager.get(session.session_id) is session
        assert manager.count() == 1
        assert manager.remove(session.session_id)
        assert not manager.remove(session.session_id)
        with pytest.raises(KeyError):
            manager.get(session.session_id)

    def test_sessions_are_independent(self):
        manager = SessionManager()
        first = manager.create()
        second = manager.create()

        assert first.session_id != second.session_id
        assert manager.count() == 2

        manager.cleanup()
        assert manager.count() == 0
