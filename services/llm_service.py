"""
LLM Service Layer
=================

Centralized service for all LLM operations in ConceptGraph.
Provides a unified chat API with timeout handling and response validation.

Calls are not retried: a failure propagates to the caller as an
LLMServiceError subclass and the user decides whether to try again.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from services.client_manager import client_manager
from services.error_handler import error_handler, LLMProviderError, LLMServiceError
from config.settings import config

logger = logging.getLogger(__name__)


class LLMService:
    """
    Centralized LLM service for the concept map agents.

    Usage:
        from services.llm_service import llm_service

        response = await llm_service.chat("Hello", model='qwen')
    """

    def __init__(self):
        self.client_manager = client_manager
        logger.info("[LLMService] Initialized")

    def initialize(self) -> None:
        """Initialize LLM Service (called at app startup)."""
        logger.info("[LLMService] Initializing...")
        self.client_manager.initialize()
        if not config.validate_llm_config():
            logger.warning("[LLMService] No LLM credentials configured, generation requests will fail")
        logger.debug("[LLMService] Ready")

    def cleanup(self) -> None:
        """Cleanup LLM Service (called at app shutdown)."""
        logger.info("[LLMService] Cleaning up...")
        self.client_manager.cleanup()
        logger.info("[LLMService] Cleanup complete")

    async def chat(
        self,
        prompt: str,
        model: str = 'qwen',
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        system_message: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Simple chat completion (single response).

        Args:
            prompt: User message/prompt
            model: LLM model to use
            temperature: Sampling temperature (None uses model default)
            max_tokens: Maximum tokens in response (None uses LLM_MAX_TOKENS)
            system_message: Optional system message
            timeout: Request timeout in seconds (None uses LLM_TIMEOUT)

        Returns:
            Complete response string

        Raises:
            LLMProviderError: If the model is not registered (error_code UnknownModel)
            LLMServiceError: On timeout, provider failure or empty output
        """
        start_time = time.time()

        try:
            logger.debug(f"[LLMService] chat() - model={model}, prompt_len={len(prompt)}")

            client = self.client_manager.get_client(model)

            messages = []
            if system_message:
                messages.append({"role": "system", "content": system_message})
            messages.append({"role": "user", "content": prompt})

            if timeout is None:
                timeout = float(config.LLM_TIMEOUT)
            if max_tokens is None:
                max_tokens = config.LLM_MAX_TOKENS

            response = await error_handler.with_timeout(
                client.async_chat_completion,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=timeout
            )

            if isinstance(response, dict):
                content = response.get('content', '')
                usage_data = response.get('usage', {})
            else:
                content = str(response) if response is not None else None
                usage_data = {}

            content = error_handler.validate_response(content)

            duration = time.time() - start_time
            logger.info(f"[LLMService] {model} responded in {duration:.2f}s")
            if usage_data:
                logger.debug(f"[LLMService] {model} usage: {usage_data}")

            return content

        except ValueError as e:
            logger.error(f"[LLMService] Unknown model '{model}': {e}")
            raise LLMProviderError(str(e), provider=model, error_code='UnknownModel') from e
        except LLMServiceError as e:
            duration = time.time() - start_time
            logger.error(f"[LLMService] {model} failed after {duration:.2f}s: {e}")
            raise
        except Exception as e:
            duration = time.time() - start_time
            logger.error(f"[LLMService] {model} failed after {duration:.2f}s: {e}")
            raise LLMServiceError(f"Chat failed for model {model}: {e}") from e

    # ============================================================================
    # UTILITY METHODS
    # ============================================================================

    def get_available_models(self) -> List[str]:
        """Get list of all available models."""
        return self.client_manager.get_available_models()

    def get_status(self) -> Dict[str, Any]:
        """Configuration summary for the health endpoint (no network calls)."""
        return {
            'initialized': self.client_manager.is_initialized(),
            'available_models': self.get_available_models(),
            'default_model': config.DEFAULT_LLM,
            'credentials_configured': bool(config.LLM_API_KEY or config.OPENAI_API_KEY),
        }


# Singleton instance
llm_service = LLMService()
