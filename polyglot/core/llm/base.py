"""
Base classes and data structures for LLM providers.

This module defines the abstract base class that chat-completion providers
implement, as well as the LLMResponse returned by a single call.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional
import httpx

from polyglot.config import REQUEST_TIMEOUT


@dataclass
class LLMResponse:
    """Response from LLM with token usage information"""
    content: str
    prompt_tokens: int = 0  # Number of tokens in the prompt
    completion_tokens: int = 0  # Number of tokens in the response


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, model: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the LLM provider.

        Args:
            model: Model name/identifier
            transport: Optional httpx transport (used to stub the network)
        """
        self.model = model
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a persistent HTTP client with connection pooling"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                timeout=httpx.Timeout(REQUEST_TIMEOUT),
                transport=self._transport
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def generate(self, messages: List[Dict[str, str]], api_key: str,
                       max_tokens: int, temperature: float,
                       timeout: float = REQUEST_TIMEOUT) -> LLMResponse:
        """
        Perform exactly one chat-completion call.

        Args:
            messages: System and user messages
            api_key: Bearer credential for this call
            max_tokens: Response token budget
            temperature: Sampling temperature
            timeout: Hard wall-clock timeout in seconds

        Returns:
            LLMResponse with the first choice's content

        Raises:
            TransientError: timeout, connection failure, 5xx or malformed body
            RemoteRejectedError: 4xx response
        """
        pass
