"""Embedding adapters used by vector store clients."""

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ..llm.models import LLMModel
from ..llm.registry import ModelRegistry
from ..llm.service import LLMService


@runtime_checkable
class Embedder(Protocol):
    """Turns text into vectors."""

    async def embed_documents(self, texts: Sequence[str]) -> List[List[float]]: ...

    async def embed_query(self, text: str) -> List[float]: ...


class LLMEmbedder:
    """Embedder backed by LLMService, pinned to a single embedding model."""

    def __init__(self, llm_service: LLMService, model: Optional[LLMModel] = None):
        self.llm_service = llm_service
        self.model = model or ModelRegistry.OPENAI_EMBEDDING_LARGE

    async def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []
        return await self.llm_service.embed_texts(texts, model=self.model)

    async def embed_query(self, text: str) -> List[float]:
        vectors = await self.llm_service.embed_texts([text], model=self.model)
        return vectors[0]
