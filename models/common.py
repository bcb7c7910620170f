"""
Common Pydantic Models and Enums
=================================

Shared enumerations used across the tree model, requests and responses.

Author: ConceptGraph Team
"""

from enum import Enum


class NodeKind(str, Enum):
    """Closed set of concept map node kinds"""
    ROOT = "root"
    CONCEPT = "concept"
    SUBCONCEPT = "subconcept"
    DETAIL = "detail"
    EXPANSION_DETAIL = "expansion-detail"


class DepthProfile(str, Enum):
    """How many hierarchy levels the tree builder materializes"""
    SHALLOW = "shallow"
    STANDARD = "standard"
    DEEP = "deep"


class EducationLevel(str, Enum):
    """Education levels a concept map can be written for"""
    INITIAL = "initial"
    PRIMARY = "primary"
    SECONDARY = "secondary"


class LLMModel(str, Enum):
    """Supported LLM clients"""
    QWEN = "qwen"
    OPENAI = "openai"


class Language(str, Enum):
    """Supported languages"""
    EN = "en"
    ES = "es"


# Aliases accepted from clients and from the original Spanish-language UI
DEPTH_PROFILE_ALIASES = {
    'basic': 'shallow',
    'basico': 'shallow',
    'básico': 'shallow',
    'intermediate': 'standard',
    'intermedio': 'standard',
    'advanced': 'deep',
    'avanzado': 'deep',
}

EDUCATION_LEVEL_ALIASES = {
    'inicial': 'initial',
    'preschool': 'initial',
    'primaria': 'primary',
    'secundaria': 'secondary',
}
