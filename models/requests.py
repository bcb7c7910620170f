"""
Request Models
==============

Pydantic models for validating API request payloads.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.concept_map_config import GRADES_BY_LEVEL
from .common import (
    DEPTH_PROFILE_ALIASES,
    EDUCATION_LEVEL_ALIASES,
    DepthProfile,
    EducationLevel,
    Language,
    LLMModel,
)


class ConceptMapGenerateRequest(BaseModel):
    """Request model for POST /api/concept_map/sessions/{session_id}/generate"""
    topic: str = Field(..., min_length=1, max_length=200, description="Central topic of the concept map")
    education_level: EducationLevel = Field(EducationLevel.PRIMARY, description="Target education level")
    grade: int = Field(3, ge=1, le=6, description="Grade within the education level")
    depth_profile: DepthProfile = Field(DepthProfile.STANDARD, description="Level of detail")
    language: Optional[Language] = Field(None, description="Content language (detected from the topic if omitted)")
    llm: Optional[LLMModel] = Field(None, description="LLM client to use (DEFAULT_LLM if omitted)")

    @field_validator('topic', mode='before')
    @classmethod
    def strip_topic(cls, v):
        """Reject blank topics"""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("topic must not be blank")
        return v

    @field_validator('depth_profile', mode='before')
    @classmethod
    def normalize_depth_profile(cls, v):
        """Normalize depth aliases (e.g., 'basico' -> 'shallow')"""
        if v is None:
            return DepthProfile.STANDARD
        v_str = v.value if hasattr(v, 'value') else str(v).strip().lower()
        return DEPTH_PROFILE_ALIASES.get(v_str, v_str)

    @field_validator('education_level', mode='before')
    @classmethod
    def normalize_education_level(cls, v):
        """Normalize education level aliases (e.g., 'primaria' -> 'primary')"""
        if v is None:
            return EducationLevel.PRIMARY
        v_str = v.value if hasattr(v, 'value') else str(v).strip().lower()
        return EDUCATION_LEVEL_ALIASES.get(v_str, v_str)

    @model_validator(mode='after')
    def check_grade_for_level(self):
        """The grade must exist within the chosen education level"""
        grades = GRADES_BY_LEVEL[self.education_level.value]
        if self.grade not in grades:
            allowed = ', '.join(str(g) for g in grades)
            raise ValueError(f"grade {self.grade} is not valid for {self.education_level.value} (allowed: {allowed})")
        return self

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "topic": "Water Cycle",
            "education_level": "primary",
            "grade": 4,
            "depth_profile": "standard",
            "language": "en",
            "llm": "qwen"
        }
    })


class NodePositionRequest(BaseModel):
    """Request model for PATCH /api/concept_map/sessions/{session_id}/nodes/{node_id}/position"""
    x: float = Field(..., description="New x coordinate of the node center")
    y: float = Field(..., description="New y coordinate of the node center")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "x": 370.0,
            "y": 210.5
        }
    })
