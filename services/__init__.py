"""
Internal Services Package

This package contains internal services:
- Error Handler: exception hierarchy and call guards
- LLM Service: centralized LLM client management
- Concept Map Session: per-session orchestration of generate/expand cycles

Modules are imported directly (e.g. `from services.llm_service import
llm_service`) so the core can use the error hierarchy without loading the
LLM clients.
"""

__all__ = [
    'error_handler',
    'client_manager',
    'llm_service',
    'concept_map_session',
]
