"""
Error Handler
=============

Exception hierarchy for the concept map core and its LLM collaborators, plus
timeout and response validation helpers for collaborator calls.

Collaborator calls are never retried automatically: a failed generation or
expansion leaves the session untouched and the user re-triggers the action.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ConceptMapError(Exception):
    """Base exception for concept map errors."""
    pass


class InvalidInputError(ConceptMapError, ValueError):
    """Raised on contract violations: empty topic, no branches, blank names."""
    pass


class NoExpandableNodesError(ConceptMapError):
    """Raised when an expansion is requested but no eligible leaf exists."""
    pass


class CollaboratorError(ConceptMapError):
    """Raised when an external collaborator fails or returns unusable data."""
    pass


class LLMServiceError(CollaboratorError):
    """Base exception for LLM service errors."""
    pass


class LLMTimeoutError(LLMServiceError):
    """Raised when LLM call times out."""
    pass


class LLMValidationError(LLMServiceError):
    """Raised when response doesn't match expected format."""
    pass


class LLMRateLimitError(LLMServiceError):
    """Raised when API rate limit is exceeded."""
    pass


class LLMContentFilterError(LLMServiceError):
    """Raised when content is flagged by the provider's safety filter."""
    pass


class LLMProviderError(LLMServiceError):
    """Raised for provider-specific errors with error code."""
    def __init__(self, message: str, provider: str = None, error_code: str = None):
        super().__init__(message)
        self.provider = provider
        self.error_code = error_code


class LLMAccessDeniedError(LLMProviderError):
    """Raised when credentials are missing or rejected."""
    pass


class ErrorHandler:
    """
    Guards collaborator calls with a timeout and validates raw responses.
    """

    @staticmethod
    async def with_timeout(
        func: Callable,
        *args,
        timeout: float,
        **kwargs
    ) -> Any:
        """
        Execute async function with timeout.

        Args:
            func: Async function to execute
            *args: Positional arguments
            timeout: Timeout in seconds
            **kwargs: Keyword arguments

        Returns:
            Result from function

        Raises:
            LLMTimeoutError: If function exceeds timeout
        """
        try:
            coro = func(*args, **kwargs)
            return await asyncio.wait_for(coro, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(f"Operation exceeded timeout of {timeout}s") from e

    @staticmethod
    def validate_response(
        response: Any,
        validator: Optional[Callable[[Any], bool]] = None
    ) -> Any:
        """
        Validate LLM response.

        Args:
            response: Response to validate
            validator: Optional custom validation function

        Returns:
            Validated response

        Raises:
            LLMValidationError: If validation fails
        """
        if response is None:
            raise LLMValidationError("Response is None")

        if isinstance(response, str) and len(response.strip()) == 0:
            raise LLMValidationError("Response is empty")

        if validator and not validator(response):
            raise LLMValidationError("Custom validation failed")

        return response


# Singleton instance
error_handler = ErrorHandler()
