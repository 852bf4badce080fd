"""
LLM Provider Implementations

Providers:
    - openai: OpenAI-compatible chat completions APIs
"""

from .openai import OpenAICompatibleProvider

__all__ = ['OpenAICompatibleProvider']
