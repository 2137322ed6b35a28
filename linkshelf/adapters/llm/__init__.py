"""LLM adapter layer - abstracts over LLM providers used for summarization."""

from linkshelf.adapters.llm.base import AbstractLLMClient
from linkshelf.adapters.llm.factory import create_llm_client
from linkshelf.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
