"""LLM provider adapters.

Two concrete implementations of ILLMProvider (src/interfaces/llm_provider.py):
    - OpenAILLMProvider    — gpt-4o (also supports OpenAI-compatible APIs)
    - AnthropicLLMProvider — Claude Sonnet

At startup, main.py creates the provider matching the available API key
(OPENAI_API_KEY or ANTHROPIC_API_KEY) and hands it to the generative
collaborator source and the role detection service.
"""

from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider", "AnthropicLLMProvider"]
