"""
Response Models
===============

Pydantic models for API response validation and documentation.
"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str = Field(..., description="Error message")
    error_type: Optional[str] = Field(None, description="Type of error")
    context: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    timestamp: Optional[float] = Field(None, description="Error timestamp")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": "Internal server error",
            "error_type": "internal",
            "timestamp": 1696800000.0
        }
    })


class RenderPosition(BaseModel):
    x: float
    y: float


class RenderNode(BaseModel):
    """Node as consumed by the rendering client"""
    id: str = Field(..., description="Stable node id")
    position: RenderPosition = Field(..., description="Center of the node")
    data: Dict[str, Any] = Field(..., description="label, kind, and optional description and color")


class RenderEdge(BaseModel):
    """Connector from a parent to a child"""
    id: str = Field(..., description="edge-{source}-{target}")
    source: str
    target: str
    label: Optional[str] = Field(None, description="Relation label of the child")


class ConceptMapResponse(BaseModel):
    """Response model for the concept map session endpoints"""
    success: bool = Field(..., description="Whether the requested change was applied")
    status: str = Field("ok", description="ok, busy, budget_exhausted or failed")
    message: Optional[str] = Field(None, description="Localized user message")
    session_id: str = Field(..., description="Concept map session id")
    topic: Optional[str] = Field(None, description="Topic of the current concept map")
    depth_profile: Optional[str] = Field(None, description="Depth profile of the current concept map")
    nodes: List[RenderNode] = Field(default_factory=list, description="Positioned nodes")
    edges: List[RenderEdge] = Field(default_factory=list, description="Connectors")
    stats: Dict[str, int] = Field(default_factory=dict, description="Node count per kind plus total")
    recommended_dimensions: Dict[str, int] = Field(default_factory=dict, description="Canvas size hint")
    expansion_count: int = Field(0, description="Expansion cycles applied to the current map")
    expansions_remaining: int = Field(0, description="Expansion cycles still allowed")
    can_expand: bool = Field(False, description="Whether an expand request would call the collaborator")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "success": True,
            "status": "ok",
            "message": "Concept map generated with 10 nodes",
            "session_id": "0f8fad5bd9cb469fa16570867728950e",
            "topic": "Water Cycle",
            "depth_profile": "standard",
            "nodes": [
                {
                    "id": "root",
                    "position": {"x": 50.0, "y": 600.0},
                    "data": {"label": "Water Cycle", "kind": "root", "color": "#6366f1"}
                }
            ],
            "edges": [
                {"id": "edge-root-concept-0", "source": "root", "target": "concept-0", "label": "has"}
            ],
            "stats": {"root": 1, "concept": 3, "subconcept": 6, "detail": 0, "expansion-detail": 0, "total": 10},
            "recommended_dimensions": {"baseWidth": 1010, "baseHeight": 1200, "padding": 80, "width": 1170, "height": 1360},
            "expansion_count": 0,
            "expansions_remaining": 3,
            "can_expand": True
        }
    })


class SessionResponse(BaseModel):
    """Response model for POST /api/concept_map/sessions"""
    session_id: str = Field(..., description="New concept map session id")
    max_expansions: int = Field(..., description="Expansion budget of the session")


class StatusResponse(BaseModel):
    """Response model for simple acknowledgements"""
    status: str = Field(..., description="Status message")
    message: Optional[str] = Field(None, description="Localized message")


class OptionsResponse(BaseModel):
    """Response model for GET /api/concept_map/options"""
    education_levels: List[str]
    grades: Dict[str, List[int]]
    depth_profiles: List[str]
    languages: List[str]
    llm_models: List[str]
    max_expansions: int
    max_expansion_targets: int


class HealthResponse(BaseModel):
    """Response model for /health endpoint"""
    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    sessions: int = Field(0, description="Active concept map sessions")
    llm: Optional[Dict[str, Any]] = Field(None, description="LLM configuration summary")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "status": "ok",
            "version": "1.0.0",
            "sessions": 2
        }
    })
