"""
ConceptGraph Models
===================

Tree model, collaborator payloads, and request/response models for FastAPI
type safety and validation.
"""

from .requests import (
    ConceptMapGenerateRequest,
    NodePositionRequest,
)

from .responses import (
    ConceptMapResponse,
    ErrorResponse,
    HealthResponse,
    OptionsResponse,
    SessionResponse,
    StatusResponse,
)

from .common import DepthProfile, EducationLevel, LLMModel, Language, NodeKind
from .concept_tree import ConceptTree, TreeNode
from .payloads import BranchDescriptor, ExpansionDescriptor, ExpansionDetail, SubBranchDescriptor
from .messages import Messages, get_request_language

__all__ = [
    # Requests
    "ConceptMapGenerateRequest",
    "NodePositionRequest",
    # Responses
    "ConceptMapResponse",
    "ErrorResponse",
    "HealthResponse",
    "OptionsResponse",
    "SessionResponse",
    "StatusResponse",
    # Common
    "DepthProfile",
    "EducationLevel",
    "LLMModel",
    "Language",
    "NodeKind",
    # Tree model
    "ConceptTree",
    "TreeNode",
    # Collaborator payloads
    "BranchDescriptor",
    "ExpansionDescriptor",
    "ExpansionDetail",
    "SubBranchDescriptor",
    # Bilingual Messages
    "Messages",
    "get_request_language",
]
