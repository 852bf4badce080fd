"""
OpenAI-compatible provider implementation.

This module provides the OpenAICompatibleProvider class for interacting with
the OpenAI chat completions API and compatible endpoints. It performs a single
attempt per call and classifies every failure; retrying is the pipeline's job.
"""

from typing import Dict, List, Optional
import asyncio
import json
import logging
import httpx

from ..base import LLMProvider, LLMResponse
from ..exceptions import RemoteRejectedError, TransientError

from polyglot.config import API_ENDPOINT, DEFAULT_MODEL, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def _remote_error_message(response: httpx.Response) -> Optional[str]:
    """Extract ``error.message`` from an error body, if the body has one."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


class OpenAICompatibleProvider(LLMProvider):
    """OpenAI-compatible API provider (OpenAI, llama.cpp, LM Studio, vLLM, etc.)"""

    def __init__(self, api_endpoint: str = API_ENDPOINT, model: str = DEFAULT_MODEL,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(model, transport=transport)
        self.api_endpoint = api_endpoint

    async def generate(self, messages: List[Dict[str, str]], api_key: str,
                       max_tokens: int, temperature: float,
                       timeout: float = REQUEST_TIMEOUT) -> LLMResponse:
        """
        Generate a chat completion using an OpenAI compatible API.

        Args:
            messages: System and user messages
            api_key: Bearer credential for this call
            max_tokens: Response token budget
            temperature: Sampling temperature
            timeout: Hard wall-clock timeout in seconds

        Returns:
            LLMResponse with the stripped content of the first choice
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        client = await self._get_client()
        try:
            response = await asyncio.wait_for(
                client.post(self.api_endpoint, json=payload, headers=headers, timeout=timeout),
                timeout=timeout
            )
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.debug(f"Request to {self.api_endpoint} timed out after {timeout}s: {e!r}")
            raise TransientError("Request timeout - please try again") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            remote_message = _remote_error_message(e.response)
            message = remote_message or f"HTTP error! status: {status}"
            logger.debug(f"HTTP {status} from {self.api_endpoint}: {e.response.text[:500]}")
            if status >= 500:
                raise TransientError(message, status_code=status) from e
            raise RemoteRejectedError(message, status_code=status,
                                      remote_message=remote_message) from e
        except httpx.TransportError as e:
            raise TransientError(f"Connection failed: {e}") from e

        try:
            response_json = response.json()
            content = response_json["choices"][0]["message"].get("content") or ""
            usage = response_json.get("usage") or {}
            if not isinstance(content, str) or not isinstance(usage, dict):
                raise TypeError("unexpected content or usage type")
            return LLMResponse(
                content=content.strip(),
                prompt_tokens=int(usage.get("prompt_tokens") or 0),
                completion_tokens=int(usage.get("completion_tokens") or 0)
            )
        except (json.JSONDecodeError, ValueError, KeyError, IndexError,
                TypeError, AttributeError) as e:
            raise TransientError(f"Malformed response from {self.api_endpoint}") from e
