"""
ConceptGraph Configuration Module
=================================

This module provides centralized configuration management for the ConceptGraph
application. It handles environment variable loading, validation, and provides
a clean interface for accessing configuration values throughout the application.

Features:
- Dynamic environment variable loading with .env support
- Property-based configuration access for real-time updates
- Validation with safe defaults for every numeric option
- Support for Dashscope-compatible and OpenAI LLM endpoints

Environment Variables:
- LLM_API_KEY / OPENAI_API_KEY: at least one is required for generation
- See env.example for complete configuration options

Usage:
    from config.settings import config
    budget = config.MAX_EXPANSIONS
"""

import os
import logging
import time
from pathlib import Path

from dotenv import load_dotenv
from utils.env_utils import ensure_utf8_env_file

logger = logging.getLogger(__name__)

# Ensure .env file is UTF-8 encoded before loading
ensure_utf8_env_file()
load_dotenv()  # Load environment variables from .env file


class Config:
    """
    Centralized configuration management for ConceptGraph.
    Values are cached for a short period so a burst of reads sees one
    consistent snapshot of the environment.
    """
    def __init__(self):
        self._cache = {}
        self._cache_timestamp = 0
        self._cache_duration = 30  # Cache for 30 seconds
        self._version = None  # Cached version from VERSION file

    @property
    def VERSION(self) -> str:
        """
        Application version - read from VERSION file (single source of truth).
        Cached after first read.
        """
        if self._version is None:
            version_file = Path(__file__).parent.parent / 'VERSION'
            try:
                self._version = version_file.read_text().strip()
            except OSError as e:
                logger.warning(f"Failed to read VERSION file: {e}")
                self._version = "0.0.0"
        return self._version

    def _get_cached_value(self, key: str, default=None):
        current_time = time.time()
        if current_time - self._cache_timestamp > self._cache_duration:
            self._cache.clear()
            self._cache_timestamp = current_time
        if key not in self._cache:
            self._cache[key] = os.environ.get(key, default)
        return self._cache[key]

    def _get_int(self, key: str, default: int, minimum: int, maximum: int) -> int:
        try:
            val = int(self._get_cached_value(key, str(default)))
            if val < minimum or val > maximum:
                logger.warning(f"{key} {val} out of range [{minimum}, {maximum}], using {default}")
                return default
            return val
        except (ValueError, TypeError):
            logger.warning(f"Invalid {key} value, using {default}")
            return default

    # ============================================================================
    # DASHSCOPE-COMPATIBLE LLM (default collaborator backend)
    # ============================================================================

    @property
    def LLM_API_KEY(self):
        api_key = self._get_cached_value('LLM_API_KEY')
        if not api_key or not isinstance(api_key, str):
            return None
        return api_key.strip()

    @property
    def LLM_API_URL(self):
        return self._get_cached_value(
            'LLM_API_URL',
            'https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions'
        )

    @property
    def LLM_MODEL(self):
        """Model for concept generation and expansion"""
        return self._get_cached_value('LLM_MODEL', 'qwen-plus')

    # ============================================================================
    # OPENAI SUPPORT
    # ============================================================================

    @property
    def OPENAI_API_KEY(self):
        api_key = self._get_cached_value('OPENAI_API_KEY')
        if not api_key or not isinstance(api_key, str):
            return None
        return api_key.strip()

    @property
    def OPENAI_BASE_URL(self):
        return self._get_cached_value('OPENAI_BASE_URL', 'https://api.openai.com/v1')

    @property
    def OPENAI_MODEL(self):
        return self._get_cached_value('OPENAI_MODEL', 'gpt-4o-mini')

    @property
    def DEFAULT_LLM(self):
        """Client used when a request does not name one"""
        return self._get_cached_value('DEFAULT_LLM', 'qwen')

    @property
    def LLM_TEMPERATURE(self):
        """Unified temperature for structured concept map output."""
        try:
            temp = float(self._get_cached_value('LLM_TEMPERATURE', '0.7'))
            if not 0.0 <= temp <= 2.0:
                logger.warning(f"Temperature {temp} out of range [0.0, 2.0], using 0.7")
                return 0.7
            return temp
        except (ValueError, TypeError):
            logger.warning("Invalid LLM_TEMPERATURE value, using 0.7")
            return 0.7

    @property
    def LLM_MAX_TOKENS(self):
        """Completion token limit when a caller does not pass one."""
        return self._get_int('LLM_MAX_TOKENS', 2000, 256, 8000)

    @property
    def LLM_TIMEOUT(self):
        """Timeout in seconds for one collaborator call."""
        return self._get_int('LLM_TIMEOUT', 40, 5, 120)

    # ============================================================================
    # CONCEPT MAP SESSION
    # ============================================================================

    @property
    def MAX_EXPANSIONS(self):
        """Expansion cycles allowed per session before requests are rejected."""
        return self._get_int('MAX_EXPANSIONS', 3, 0, 20)

    @property
    def MAX_EXPANSION_TARGETS(self):
        """Leaf nodes sent to the expansion collaborator per cycle."""
        return self._get_int('MAX_EXPANSION_TARGETS', 4, 1, 4)

    @property
    def DEFAULT_LANGUAGE(self):
        lang = self._get_cached_value('DEFAULT_LANGUAGE', 'en').lower()
        if lang not in ('en', 'es'):
            logger.warning(f"Invalid DEFAULT_LANGUAGE '{lang}', using en")
            return 'en'
        return lang

    # ============================================================================
    # SERVER
    # ============================================================================

    @property
    def HOST(self):
        """FastAPI application host address."""
        return self._get_cached_value('HOST', '0.0.0.0')

    @property
    def PORT(self):
        """FastAPI application port number."""
        return self._get_int('PORT', 9527, 1, 65535)

    @property
    def DEBUG(self):
        """FastAPI debug mode setting."""
        return self._get_cached_value('DEBUG', 'False').lower() == 'true'

    @property
    def LOG_LEVEL(self):
        """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""
        level = self._get_cached_value('LOG_LEVEL', 'INFO').upper()
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if level not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{level}', using INFO")
            return 'INFO'
        return level

    @property
    def VERBOSE_LOGGING(self):
        """Enable verbose logging for debugging."""
        return self._get_cached_value('VERBOSE_LOGGING', 'False').lower() == 'true'

    def validate_llm_config(self) -> bool:
        """Check that at least one LLM backend has credentials."""
        if not self.LLM_API_KEY and not self.OPENAI_API_KEY:
            logger.error("Neither LLM_API_KEY nor OPENAI_API_KEY is configured")
            return False
        return True


# Create global configuration instance
config = Config()
