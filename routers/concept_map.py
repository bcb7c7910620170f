"""
Concept Map API Routes
======================

Session-based endpoints for generating, expanding and arranging concept maps.

Every mutating endpoint answers with the full render spec of the session so
the client can redraw from scratch. A collaborator failure is reported as
success=false with a localized message; the previous map stays in place.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from agents.core.agent_utils import detect_language
from config.concept_map_config import GRADES_BY_LEVEL
from config.settings import config
from models import (
    ConceptMapGenerateRequest,
    ConceptMapResponse,
    Messages,
    NodePositionRequest,
    OptionsResponse,
    SessionResponse,
    StatusResponse,
    get_request_language,
)
from models.common import DepthProfile, EducationLevel, Language, LLMModel
from services.concept_map_session import (
    ConceptMapSession,
    CycleResult,
    GenerationConfig,
    SessionManager,
    SessionStatus,
    session_manager,
)
from services.error_handler import InvalidInputError, NoExpandableNodesError

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/concept_map", tags=["concept_map"])


def get_session_manager() -> SessionManager:
    """Dependency returning the process-wide session registry."""
    return session_manager


def _get_session(manager: SessionManager, session_id: str, lang: str) -> ConceptMapSession:
    try:
        return manager.get(session_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=Messages.error("session_not_found", lang, session_id)
        )


def _to_response(session: ConceptMapSession, result: Optional[CycleResult] = None) -> ConceptMapResponse:
    spec = session.render()
    if result is None:
        return ConceptMapResponse(success=True, status=SessionStatus.OK.value, **spec)
    return ConceptMapResponse(
        success=result.success,
        status=result.status.value,
        message=result.message,
        **spec
    )


# ============================================================================
# SESSIONS
# ============================================================================

@router.post('/sessions', response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(manager: SessionManager = Depends(get_session_manager)):
    """Create an empty concept map session."""
    session = manager.create()
    logger.info(f"[ConceptMapAPI] Session created: {session.session_id} ({manager.count()} active)")
    return SessionResponse(session_id=session.session_id, max_expansions=session.max_expansions)


@router.get('/sessions/{session_id}', response_model=ConceptMapResponse)
async def get_session(
    session_id: str,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """Current render spec of a session."""
    lang = get_request_language(x_language)
    session = _get_session(manager, session_id, lang)
    return _to_response(session)


@router.delete('/sessions/{session_id}', response_model=StatusResponse)
async def delete_session(
    session_id: str,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """Discard a session and everything it holds."""
    lang = get_request_language(x_language)
    if not manager.remove(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=Messages.error("session_not_found", lang, session_id)
        )
    return StatusResponse(status="deleted")


# ============================================================================
# GENERATE / EXPAND
# ============================================================================

@router.post('/sessions/{session_id}/generate', response_model=ConceptMapResponse)
async def generate_concept_map(
    session_id: str,
    req: ConceptMapGenerateRequest,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Generate a new concept map for the session.

    Replaces the current map on success and resets the expansion counter.
    """
    language = req.language.value if req.language else detect_language(req.topic)
    lang = get_request_language(x_language) if x_language else language
    session = _get_session(manager, session_id, lang)

    llm_model = req.llm.value if req.llm else config.DEFAULT_LLM
    request = GenerationConfig(
        topic=req.topic,
        education_level=req.education_level,
        grade=req.grade,
        depth_profile=req.depth_profile,
        language=language,
        llm=llm_model,
    )
    logger.debug(
        f"[ConceptMapAPI] Generate {session_id}: topic={req.topic!r}, level={req.education_level.value}, "
        f"grade={req.grade}, depth={req.depth_profile.value}, language={language}, llm={llm_model}"
    )

    try:
        result = await session.generate(request)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _to_response(session, result)


@router.post('/sessions/{session_id}/regenerate', response_model=ConceptMapResponse)
async def regenerate_concept_map(
    session_id: str,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """Generate again with the last requested configuration."""
    lang = get_request_language(x_language)
    session = _get_session(manager, session_id, lang)

    try:
        result = await session.regenerate()
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _to_response(session, result)


@router.post('/sessions/{session_id}/expand', response_model=ConceptMapResponse)
async def expand_concept_map(
    session_id: str,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Add deeper detail under the first childless concepts of the map.

    Returns status budget_exhausted once the session's expansion budget is
    spent, and 409 when no concept is left to expand.
    """
    lang = get_request_language(x_language)
    session = _get_session(manager, session_id, lang)

    try:
        result = await session.expand()
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NoExpandableNodesError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return _to_response(session, result)


# ============================================================================
# VISUAL EDITS
# ============================================================================

@router.patch('/sessions/{session_id}/nodes/{node_id}/position', response_model=ConceptMapResponse)
async def move_node(
    session_id: str,
    node_id: str,
    req: NodePositionRequest,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """Record a drag position. Dropped by the next generate or expand."""
    lang = get_request_language(x_language)
    session = _get_session(manager, session_id, lang)

    try:
        session.move_node(node_id, req.x, req.y)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=Messages.error("node_not_found", lang, node_id)
        )

    response = _to_response(session)
    response.message = Messages.success("node_moved", lang)
    return response


@router.post('/sessions/{session_id}/clear', response_model=ConceptMapResponse)
async def clear_concept_map(
    session_id: str,
    x_language: Optional[str] = Header(None),
    manager: SessionManager = Depends(get_session_manager)
):
    """Discard the map, its configuration and counters; the session stays."""
    lang = get_request_language(x_language)
    session = _get_session(manager, session_id, lang)
    session.clear()

    response = _to_response(session)
    response.message = Messages.success("session_cleared", lang)
    return response


# ============================================================================
# OPTIONS
# ============================================================================

@router.get('/options', response_model=OptionsResponse)
async def get_options():
    """Choices offered by the configuration form."""
    return OptionsResponse(
        education_levels=[level.value for level in EducationLevel],
        grades={level: list(grades) for level, grades in GRADES_BY_LEVEL.items()},
        depth_profiles=[profile.value for profile in DepthProfile],
        languages=[language.value for language in Language],
        llm_models=[model.value for model in LLMModel],
        max_expansions=config.MAX_EXPANSIONS,
        max_expansion_targets=config.MAX_EXPANSION_TARGETS,
    )
