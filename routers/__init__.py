"""
ConceptGraph FastAPI Routers
============================

This package contains all FastAPI route modules organized by functionality.

Routers:
- concept_map.py: Concept map sessions (generate, expand, move, clear)
"""

__all__ = [
    "concept_map",
]
