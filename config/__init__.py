"""
Configuration Package

This package contains application configuration:
- settings: Environment-driven settings (Config class and config instance)
- concept_map_config: Layout constants, palette and education tables
"""

from .settings import Config, config

__all__ = [
    'Config',
    'config',
]
