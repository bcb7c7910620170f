"""
Collaborator Payload Models
===========================

Pydantic models for the structured text the content-generation and expansion
collaborators hand to the tree builder and the expansion mutator.

LLM answers drift in key naming, so every field also accepts the Spanish keys
used by the first version of the prompts.

Author: ConceptGraph Team
"""

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _clean_required(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("must be a non-empty string")
    return value.strip()


def _clean_optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


class SubBranchDescriptor(BaseModel):
    """Second-level topic with optional concrete examples"""
    name: str = Field(..., validation_alias=AliasChoices('name', 'nombre'))
    description: Optional[str] = Field(None, validation_alias=AliasChoices('description', 'descripcion'))
    example_items: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices('example_items', 'examples', 'ejemplos')
    )

    @field_validator('name', mode='before')
    @classmethod
    def clean_name(cls, v):
        return _clean_required(v)

    @field_validator('description', mode='before')
    @classmethod
    def clean_description(cls, v):
        return _clean_optional(v)

    @field_validator('example_items', mode='before')
    @classmethod
    def normalize_examples(cls, v):
        """Keep non-blank example strings; objects contribute their name."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("examples must be a list")
        items = []
        for item in v:
            if isinstance(item, dict):
                item = item.get('name') or item.get('nombre') or ''
            item = str(item).strip()
            if item:
                items.append(item)
        return items


class BranchDescriptor(BaseModel):
    """Top-level topic produced by the content-generation collaborator"""
    name: str = Field(..., validation_alias=AliasChoices('name', 'nombre'))
    description: Optional[str] = Field(None, validation_alias=AliasChoices('description', 'descripcion'))
    relation_label: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('relation_label', 'relation', 'relacion')
    )
    sub_branches: List[SubBranchDescriptor] = Field(
        default_factory=list,
        validation_alias=AliasChoices('sub_branches', 'sub_concepts', 'subconceptos')
    )

    @field_validator('name', mode='before')
    @classmethod
    def clean_name(cls, v):
        return _clean_required(v)

    @field_validator('description', 'relation_label', mode='before')
    @classmethod
    def clean_optional_text(cls, v):
        return _clean_optional(v)

    @field_validator('sub_branches', mode='before')
    @classmethod
    def default_sub_branches(cls, v):
        return [] if v is None else v

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Evaporation",
            "description": "Water turns into vapor when heated by the sun",
            "relation_label": "begins with",
            "sub_branches": [
                {
                    "name": "Solar energy",
                    "description": "Heat from the sun drives evaporation",
                    "example_items": ["Puddles drying", "Wet clothes drying"]
                }
            ]
        }
    })


class ExpansionDetail(BaseModel):
    """One new detail produced for an expansion target"""
    name: str = Field(..., validation_alias=AliasChoices('name', 'nombre'))
    description: Optional[str] = Field(None, validation_alias=AliasChoices('description', 'descripcion'))

    @field_validator('name', mode='before')
    @classmethod
    def clean_name(cls, v):
        return _clean_required(v)

    @field_validator('description', mode='before')
    @classmethod
    def clean_description(cls, v):
        return _clean_optional(v)


class ExpansionDescriptor(BaseModel):
    """Details to attach under the node named target_name"""
    target_name: str = Field(
        ...,
        validation_alias=AliasChoices('target_name', 'target', 'conceptoOriginal')
    )
    details: List[ExpansionDetail] = Field(
        default_factory=list,
        validation_alias=AliasChoices('details', 'subDetalles')
    )

    @field_validator('target_name', mode='before')
    @classmethod
    def clean_target(cls, v):
        return _clean_required(v)

    @field_validator('details', mode='before')
    @classmethod
    def default_details(cls, v):
        return [] if v is None else v

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "target_name": "Solar energy",
            "details": [
                {"name": "Radiation", "description": "Energy travelling from the sun"}
            ]
        }
    })
