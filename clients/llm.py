"""
LLM Clients for Concept Map Collaborators

This module provides async chat completion clients used by the concept map
generation and expansion agents:

- QwenClient: Dashscope OpenAI-compatible endpoint over aiohttp
- OpenAIClient: any OpenAI-compatible endpoint through the openai SDK

Both return {'content': str, 'usage': dict} and translate provider failures
into the LLM* exceptions of services.error_handler.
"""

import asyncio
import json
import logging
from typing import Dict, List

import aiohttp
from openai import AsyncOpenAI, APIStatusError, APITimeoutError, RateLimitError

from config.settings import config
from services.error_handler import (
    LLMAccessDeniedError,
    LLMContentFilterError,
    LLMProviderError,
    LLMRateLimitError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)


def raise_for_status(provider: str, status: int, error_text: str) -> None:
    """
    Map an HTTP error status onto the LLM exception hierarchy.

    Always raises.
    """
    error_code = f'HTTP{status}'
    message = error_text
    try:
        error_data = json.loads(error_text)
        error = error_data.get('error') if isinstance(error_data, dict) else None
        if isinstance(error, dict):
            error_code = error.get('code') or error_code
            message = error.get('message') or message
        elif isinstance(error_data, dict) and error_data.get('code'):
            error_code = error_data['code']
            message = error_data.get('message') or message
    except json.JSONDecodeError:
        pass

    if status == 429:
        raise LLMRateLimitError(f"{provider} rate limit: {message}")
    if status in (401, 403):
        raise LLMAccessDeniedError(f"Unauthorized: {message}", provider=provider, error_code=str(error_code))
    if error_code in ('DataInspectionFailed', 'content_filter', 'content_policy_violation'):
        raise LLMContentFilterError(f"{provider} content filter: {message}")
    raise LLMProviderError(f"{provider} API error ({status}): {message}", provider=provider, error_code=str(error_code))


class QwenClient:
    """Async client for Qwen via the Dashscope compatible-mode API"""

    def __init__(self, model_name: str = None):
        self.api_url = config.LLM_API_URL
        self.api_key = config.LLM_API_KEY
        self.model_name = model_name or config.LLM_MODEL
        self.timeout = config.LLM_TIMEOUT
        self.default_temperature = config.LLM_TEMPERATURE
        logger.debug(f"QwenClient initialized with model: {self.model_name}")

    async def async_chat_completion(self, messages: List[Dict], temperature: float = None,
                                    max_tokens: int = 2000) -> Dict:
        """
        Send chat completion request to Qwen

        Args:
            messages: List of message dictionaries with 'role' and 'content'
            temperature: Sampling temperature (0.0 to 2.0), None uses default
            max_tokens: Maximum tokens in response

        Returns:
            dict with 'content' and 'usage'
        """
        if not self.api_key:
            raise LLMAccessDeniedError("LLM_API_KEY is not configured", provider='qwen', error_code='MissingApiKey')

        if temperature is None:
            temperature = self.default_temperature

        payload = {
            "model": self.model_name,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
            # Qwen3 models require enable_thinking: False outside streaming
            "enable_thinking": False,
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(self.api_url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Qwen API error {response.status}: {error_text}")
                        raise_for_status('qwen', response.status, error_text)

                    data = await response.json()
                    content = data.get('choices', [{}])[0].get('message', {}).get('content', '')
                    logger.debug(f"Qwen response length: {len(content or '')} chars")
                    return {
                        'content': content,
                        'usage': data.get('usage', {})
                    }

        except asyncio.TimeoutError as e:
            logger.error("Qwen API timeout")
            raise LLMTimeoutError("Qwen API timeout") from e
        except aiohttp.ClientError as e:
            logger.error(f"Qwen connection error: {e}")
            raise LLMProviderError(f"Qwen connection error: {e}", provider='qwen', error_code='ConnectionError') from e


class OpenAIClient:
    """Client for OpenAI or any OpenAI-compatible API"""

    def __init__(self, model_name: str = None):
        self.api_key = config.OPENAI_API_KEY
        self.base_url = config.OPENAI_BASE_URL
        self.model_name = model_name or config.OPENAI_MODEL
        self.timeout = config.LLM_TIMEOUT
        self.default_temperature = config.LLM_TEMPERATURE

        self.client = None
        if self.api_key:
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout
            )

        logger.debug(f"OpenAIClient initialized with model: {self.model_name}")

    async def async_chat_completion(self, messages: List[Dict], temperature: float = None,
                                    max_tokens: int = 2000) -> Dict:
        """
        Send chat completion request through the OpenAI SDK

        Args:
            messages: List of message dictionaries with 'role' and 'content'
            temperature: Sampling temperature (0.0 to 2.0), None uses default
            max_tokens: Maximum tokens in response

        Returns:
            dict with 'content' and 'usage'
        """
        if self.client is None:
            raise LLMAccessDeniedError("OPENAI_API_KEY is not configured", provider='openai', error_code='MissingApiKey')

        if temperature is None:
            temperature = self.default_temperature

        logger.debug(f"OpenAI async API request: {self.model_name} (temp: {temperature})")

        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except RateLimitError as e:
            logger.error(f"OpenAI rate limit error: {e}")
            raise LLMRateLimitError(f"OpenAI rate limit: {e}") from e
        except APITimeoutError as e:
            logger.error("OpenAI API timeout")
            raise LLMTimeoutError("OpenAI API timeout") from e
        except APIStatusError as e:
            logger.error(f"OpenAI API status error: {e}")
            error_text = e.response.text if e.response is not None else str(e)
            raise_for_status('openai', e.status_code, error_text)

        choice = completion.choices[0]
        if choice.finish_reason == 'content_filter':
            raise LLMContentFilterError("OpenAI content filter triggered")

        usage = {}
        if completion.usage:
            usage = {
                'prompt_tokens': completion.usage.prompt_tokens,
                'completion_tokens': completion.usage.completion_tokens,
                'total_tokens': completion.usage.total_tokens
            }
        return {
            'content': choice.message.content or '',
            'usage': usage
        }
