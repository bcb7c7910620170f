"""
LLM Client Manager
==================

Manages lifecycle and access to the LLM client instances.
Implements singleton pattern for efficient resource usage.

This is a stateless service layer: it does not store sessions or conversation
history, it only provides access to LLM clients. Concept map sessions live in
services.concept_map_session.
"""

import logging
from typing import Dict, Any
from threading import Lock

from clients.llm import QwenClient, OpenAIClient

logger = logging.getLogger(__name__)


class ClientManager:
    """
    Thread-safe manager for all LLM clients.
    Ensures only one instance of each client exists (singleton per client type).
    """

    def __init__(self):
        self._clients: Dict[str, Any] = {}
        self._lock = Lock()
        self._initialized = False
        logger.debug("[ClientManager] Initialized")

    def initialize(self) -> None:
        """
        Initialize all LLM clients.
        Called once during application startup.
        """
        if self._initialized:
            logger.warning("[ClientManager] Already initialized, skipping")
            return

        with self._lock:
            if self._initialized:  # Double-check after acquiring lock
                return

            logger.debug("[ClientManager] Initializing LLM clients...")

            try:
                self._clients['qwen'] = QwenClient()
                self._clients['openai'] = OpenAIClient()

                self._initialized = True
                logger.debug(f"[ClientManager] Initialized {len(self._clients)} LLM clients")

            except Exception as e:
                logger.error(f"[ClientManager] Initialization failed: {e}", exc_info=True)
                raise

    def register_client(self, model: str, client: Any) -> None:
        """Register or replace a client under a model name."""
        with self._lock:
            self._clients[model] = client
            self._initialized = True
        logger.debug(f"[ClientManager] Registered client '{model}'")

    def get_client(self, model: str) -> Any:
        """
        Get LLM client instance by model name.

        Args:
            model: Model name ('qwen', 'openai')

        Returns:
            Appropriate client instance

        Raises:
            ValueError: If model not supported
            RuntimeError: If clients not initialized
        """
        if not self._initialized:
            raise RuntimeError(
                "ClientManager not initialized. Call initialize() first."
            )

        if model not in self._clients:
            available = ', '.join(self._clients.keys())
            raise ValueError(
                f"Unsupported model: {model}. "
                f"Available models: {available}"
            )

        return self._clients[model]

    def is_initialized(self) -> bool:
        """Check if client manager is initialized."""
        return self._initialized

    def get_available_models(self) -> list:
        """Get list of available model names."""
        return list(self._clients.keys())

    def cleanup(self) -> None:
        """
        Cleanup all clients (called during shutdown).
        """
        logger.debug("[ClientManager] Cleaning up clients...")
        with self._lock:
            self._clients.clear()
            self._initialized = False
        logger.debug("[ClientManager] Cleanup complete")


# Singleton instance
client_manager = ClientManager()
