"""Provider clients."""

from .base import LLMClient
from .openai_client import OpenAIClient

__all__ = ["LLMClient", "OpenAIClient"]
